"""
Parser for cookie-based session affinity.

Extracts:
- <prefix>/affinity: only "cookie" is recognized
- <prefix>/session-cookie-name: defaults to INGRESSCOOKIE
- <prefix>/session-cookie-hash: index | md5 | sha1, defaults to md5
"""

import re
from dataclasses import dataclass

from annotex.core.errors import InvalidContentError
from annotex.models import Ingress
from annotex.parsers.annotations.base import IngressAnnotation, get_string_annotation

AFFINITY_TYPE = "affinity"
COOKIE_NAME = "session-cookie-name"
COOKIE_HASH = "session-cookie-hash"

DEFAULT_COOKIE_NAME = "INGRESSCOOKIE"
DEFAULT_COOKIE_HASH = "md5"

_HASH_PATTERN = re.compile(r"^(index|md5|sha1)$")


@dataclass(frozen=True)
class AffinityConfig:
    affinity_type: str = ""
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_hash: str = DEFAULT_COOKIE_HASH


class SessionAffinityParser(IngressAnnotation):
    name = "SessionAffinity"

    def parse(self, ing: Ingress) -> AffinityConfig:
        affinity = get_string_annotation(self.key(AFFINITY_TYPE), ing)
        if affinity != "cookie":
            raise InvalidContentError(f"unsupported affinity type '{affinity}'")

        cookie_hash = self.field_or_default(get_string_annotation, COOKIE_HASH, ing, DEFAULT_COOKIE_HASH)
        if not _HASH_PATTERN.match(cookie_hash):
            self.logger.warning(f"Invalid {COOKIE_HASH} '{cookie_hash}' on {ing}, using {DEFAULT_COOKIE_HASH}")
            cookie_hash = DEFAULT_COOKIE_HASH

        return AffinityConfig(
            affinity_type=affinity,
            cookie_name=self.field_or_default(get_string_annotation, COOKIE_NAME, ing, DEFAULT_COOKIE_NAME),
            cookie_hash=cookie_hash,
        )

    def default(self, ing: Ingress) -> AffinityConfig:
        return AffinityConfig()
