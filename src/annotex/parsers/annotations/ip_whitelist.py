#!/usr/bin/env python3
"""
Parser for client source-range whitelisting.

Extracts:
- <prefix>/whitelist-source-range: comma-separated list of CIDRs

Entries are normalized (host bits cleared, bare addresses widened to /32 or
/128) and sorted. A single invalid entry invalidates the whole list, which
then falls back to the provider's backend whitelist.
"""

import ipaddress
from dataclasses import dataclass, field
from typing import List

from annotex.core.errors import InvalidContentError
from annotex.models import Ingress
from annotex.parsers.annotations.base import IngressAnnotation, get_string_annotation

WHITELIST_SOURCE_RANGE = "whitelist-source-range"


@dataclass(frozen=True)
class SourceRange:
    cidrs: List[str] = field(default_factory=list)


def parse_cidrs(raw: str) -> List[str]:
    networks = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError as e:
            raise InvalidContentError(f"invalid CIDR '{entry}': {e}")

    if not networks:
        raise InvalidContentError("whitelist contains no CIDR")

    # v4 before v6, then by address
    networks.sort(key=lambda n: (n.version, n))
    return [str(n) for n in networks]


class IPWhitelistParser(IngressAnnotation):
    name = "Whitelist"

    def parse(self, ing: Ingress) -> SourceRange:
        raw = get_string_annotation(self.key(WHITELIST_SOURCE_RANGE), ing)
        return SourceRange(cidrs=parse_cidrs(raw))

    def default(self, ing: Ingress) -> SourceRange:
        return SourceRange(cidrs=list(self.backend_defaults().whitelist_source_range))
