#!/usr/bin/env python3
"""
ANNOTEX CONFIGURATION PROVIDER
------------------------------
The contract the extractor depends on to resolve cluster-wide defaults and
credentials, plus an in-memory implementation backed by Secret manifests.

Implementations must be safe for concurrent use: one provider instance is
shared by every extraction running on the same extractor.

Metadata:
    - Component: Resolver Interface
    - Author: Annotex Team
"""

import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from annotex.core.errors import ResolverError
from annotex.models import AuthSSLCert, DefaultBackend, Secret

logger = logging.getLogger("annotex.resolver")

CA_CERT_KEY = "ca.crt"


class ConfigurationProvider(ABC):
    """
    Supplies defaults and credential lookups to the annotation parsers.

    Lookups either return the resolved object or raise ResolverError.
    Returning None is tolerated and treated by callers as "not found".
    """

    @abstractmethod
    def get_default_backend(self) -> DefaultBackend:
        pass

    @abstractmethod
    def get_secret(self, name: str) -> Optional[Secret]:
        """
        Args:
            name: Secret reference in "namespace/name" form.
        """
        pass

    @abstractmethod
    def get_auth_certificate(self, name: str) -> Optional[AuthSSLCert]:
        """
        Args:
            name: Secret reference in "namespace/name" form holding a CA.
        """
        pass


class ManifestProvider(ConfigurationProvider):
    """
    Resolves secrets from Secret manifests loaded up front.
    Read-only after construction.
    """

    def __init__(self, backend: Optional[DefaultBackend] = None, secrets: Iterable[Secret] = ()):
        self._backend = backend or DefaultBackend()
        self._secrets: Dict[str, Secret] = {s.key: s for s in secrets}
        logger.debug(f"Provider initialized with {len(self._secrets)} secrets")

    def get_default_backend(self) -> DefaultBackend:
        return self._backend

    def get_secret(self, name: str) -> Secret:
        secret = self._secrets.get(name)
        if secret is None:
            raise ResolverError(f"secret {name} was not found")
        return secret

    def get_auth_certificate(self, name: str) -> AuthSSLCert:
        secret = self.get_secret(name)
        ca = secret.data.get(CA_CERT_KEY)
        if not ca:
            raise ResolverError(f"secret {name} does not contain a '{CA_CERT_KEY}' key")

        return AuthSSLCert(
            secret=name,
            ca_file_name=f"ca-{secret.namespace}-{secret.name}.pem",
            pem_sha=hashlib.sha1(ca).hexdigest(),
        )
