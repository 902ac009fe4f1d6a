#!/usr/bin/env python3
"""
Parser for per-client rate limiting.

Extracts:
- <prefix>/limit-connections: concurrent connections allowed per client IP
- <prefix>/limit-rps: requests per second allowed per client IP

Each limit gets its own shared-memory zone named after the resource
(<namespace>_<name>_conn / _rps) with a burst of five times the limit.
"""

from dataclasses import dataclass, field

from annotex.models import Ingress
from annotex.parsers.annotations.base import IngressAnnotation, get_int_annotation

LIMIT_CONNECTIONS = "limit-connections"
LIMIT_RPS = "limit-rps"

DEFAULT_SHARED_SIZE = 5  # MB
DEFAULT_BURST = 5


@dataclass(frozen=True)
class Zone:
    name: str = ""
    limit: int = 0
    burst: int = 0
    shared_size: int = 0


@dataclass(frozen=True)
class RateLimit:
    connections: Zone = field(default_factory=Zone)
    rps: Zone = field(default_factory=Zone)

    @property
    def enabled(self) -> bool:
        return self.connections.limit > 0 or self.rps.limit > 0


class RateLimitParser(IngressAnnotation):
    name = "RateLimit"

    def _limit(self, suffix: str, ing: Ingress) -> int:
        value = self.field_or_default(get_int_annotation, suffix, ing, 0)
        if value < 0:
            self.logger.warning(f"Ignoring negative {self.key(suffix)} on {ing}: {value}")
            return 0
        return value

    def parse(self, ing: Ingress) -> RateLimit:
        conn = self._limit(LIMIT_CONNECTIONS, ing)
        rps = self._limit(LIMIT_RPS, ing)
        if conn == 0 and rps == 0:
            return self.default(ing)

        zone_name = f"{ing.namespace}_{ing.name}"
        return RateLimit(
            connections=self._zone(f"{zone_name}_conn", conn),
            rps=self._zone(f"{zone_name}_rps", rps),
        )

    @staticmethod
    def _zone(name: str, limit: int) -> Zone:
        if limit == 0:
            return Zone()
        return Zone(name=name, limit=limit, burst=limit * DEFAULT_BURST, shared_size=DEFAULT_SHARED_SIZE)

    def default(self, ing: Ingress) -> RateLimit:
        return RateLimit()
