#!/usr/bin/env python3
"""
Parser for client-certificate authentication.

Extracts:
- <prefix>/auth-tls-secret: "namespace/name" of a Secret holding ca.crt
- <prefix>/auth-tls-verify-depth: client chain verification depth (default 1)
"""

from dataclasses import dataclass
from typing import Optional

from annotex.core.errors import InvalidContentError
from annotex.models import AuthSSLCert, Ingress, Resolved
from annotex.parsers.annotations.base import (
    ResolvedAnnotation,
    get_int_annotation,
    get_string_annotation,
    split_name,
)

AUTH_TLS_SECRET = "auth-tls-secret"
AUTH_TLS_DEPTH = "auth-tls-verify-depth"

DEFAULT_VERIFY_DEPTH = 1


@dataclass(frozen=True)
class AuthSSLConfig:
    auth_ssl_cert: Optional[AuthSSLCert] = None
    validation_depth: int = DEFAULT_VERIFY_DEPTH


class AuthTLSParser(ResolvedAnnotation):
    name = "CertificateAuth"

    def parse(self, ing: Ingress) -> Resolved:
        secret_name = get_string_annotation(self.key(AUTH_TLS_SECRET), ing)
        if split_name(secret_name) is None:
            raise InvalidContentError(f"{AUTH_TLS_SECRET} '{secret_name}' must be in the form namespace/name")

        depth = self.field_or_default(get_int_annotation, AUTH_TLS_DEPTH, ing, DEFAULT_VERIFY_DEPTH)
        if depth < 1:
            self.logger.warning(f"Invalid {AUTH_TLS_DEPTH} {depth} on {ing}, using {DEFAULT_VERIFY_DEPTH}")
            depth = DEFAULT_VERIFY_DEPTH

        cert = self.lookup(self.provider.get_auth_certificate, secret_name, "certificate")
        return Resolved(value=AuthSSLConfig(auth_ssl_cert=cert, validation_depth=depth))
