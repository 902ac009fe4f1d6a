#!/usr/bin/env python3
"""
Parser for upstream health-check thresholds.

Extracts:
- <prefix>/upstream-max-fails: failed attempts before the server is marked down
- <prefix>/upstream-fail-timeout: seconds the server stays marked down

Each field defaults independently to the provider's backend settings, so a
malformed max-fails never disturbs a valid fail-timeout.
"""

from dataclasses import dataclass

from annotex.models import Ingress
from annotex.parsers.annotations.base import IngressAnnotation, get_int_annotation

UPSTREAM_MAX_FAILS = "upstream-max-fails"
UPSTREAM_FAIL_TIMEOUT = "upstream-fail-timeout"


@dataclass(frozen=True)
class Upstream:
    max_fails: int = 0
    fail_timeout: int = 0


class HealthCheckParser(IngressAnnotation):
    """Always returns an Upstream, never None."""

    name = "HealthCheck"

    def parse(self, ing: Ingress) -> Upstream:
        defaults = self.backend_defaults()
        return Upstream(
            max_fails=self.field_or_default(
                get_int_annotation, UPSTREAM_MAX_FAILS, ing, defaults.upstream_max_fails
            ),
            fail_timeout=self.field_or_default(
                get_int_annotation, UPSTREAM_FAIL_TIMEOUT, ing, defaults.upstream_fail_timeout
            ),
        )

    def default(self, ing: Ingress) -> Upstream:
        defaults = self.backend_defaults()
        return Upstream(
            max_fails=defaults.upstream_max_fails,
            fail_timeout=defaults.upstream_fail_timeout,
        )
