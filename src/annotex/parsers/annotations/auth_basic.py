#!/usr/bin/env python3
"""
Parser for HTTP basic/digest authentication.

Extracts:
- <prefix>/auth-type: "basic" or "digest"
- <prefix>/auth-secret: Secret holding an htpasswd file under the "auth" key
- <prefix>/auth-realm: realm presented to the client (optional)

The secret is looked up through the Configuration Provider; bare names are
qualified with the resource's namespace.
"""

import hashlib
from dataclasses import dataclass, field

from annotex.core.errors import InvalidContentError, ResolverError
from annotex.models import Ingress, Resolved
from annotex.parsers.annotations.base import (
    ResolvedAnnotation,
    get_string_annotation,
    qualify_name,
)

AUTH_TYPE = "auth-type"
AUTH_SECRET = "auth-secret"
AUTH_REALM = "auth-realm"

AUTH_TYPES = ("basic", "digest")
AUTH_DATA_KEY = "auth"


@dataclass(frozen=True)
class BasicDigest:
    auth_type: str
    realm: str
    secret: str
    file_sha: str
    secured: bool = True
    credentials: bytes = field(default=b"", repr=False)


class BasicDigestAuthParser(ResolvedAnnotation):
    name = "BasicDigestAuth"

    def parse(self, ing: Ingress) -> Resolved:
        auth_type = get_string_annotation(self.key(AUTH_TYPE), ing)
        if auth_type not in AUTH_TYPES:
            raise InvalidContentError(f"{auth_type} is not a valid authentication type")

        secret_name = self.field_or_default(get_string_annotation, AUTH_SECRET, ing, "")
        if not secret_name:
            raise InvalidContentError(f"{self.key(AUTH_SECRET)} is required when {AUTH_TYPE} is set")
        secret_name = qualify_name(secret_name, ing.namespace)

        secret = self.lookup(self.provider.get_secret, secret_name, "secret")
        credentials = secret.data.get(AUTH_DATA_KEY)
        if not credentials:
            raise ResolverError(f"secret {secret_name} does not contain a key with value {AUTH_DATA_KEY}")

        return Resolved(value=BasicDigest(
            auth_type=auth_type,
            realm=self.field_or_default(get_string_annotation, AUTH_REALM, ing, ""),
            secret=secret_name,
            file_sha=hashlib.sha1(credentials).hexdigest(),
            credentials=credentials,
        ))
