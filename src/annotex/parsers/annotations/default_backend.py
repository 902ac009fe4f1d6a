#!/usr/bin/env python3
"""
Parser for the per-resource default backend.

Extracts:
- <prefix>/default-backend: "service" or "service:port" overriding spec.backend

Without the annotation the resource's own spec.backend is used. A malformed
override keeps spec.backend as the value and reports the error alongside it.
"""

import re

from annotex.core.errors import InvalidContentError
from annotex.models import Ingress, IngressBackend, Resolved
from annotex.parsers.annotations.base import ResolvedAnnotation, get_string_annotation

DEFAULT_BACKEND = "default-backend"

# DNS-1035 service name, optional numeric or named port
_BACKEND_PATTERN = re.compile(r"^([a-z]([-a-z0-9]*[a-z0-9])?)(:([0-9]+|[a-z0-9]([-a-z0-9]*[a-z0-9])?))?$")


def parse_backend(value: str) -> IngressBackend:
    match = _BACKEND_PATTERN.match(value)
    if not match:
        raise InvalidContentError(f"'{value}' is not a valid service reference")

    port = match.group(4)
    if port is None:
        return IngressBackend(service_name=match.group(1))
    return IngressBackend(service_name=match.group(1), service_port=int(port) if port.isdigit() else port)


class DefaultBackendParser(ResolvedAnnotation):
    name = "DefaultBackend"

    def parse(self, ing: Ingress) -> Resolved:
        try:
            return Resolved(value=parse_backend(get_string_annotation(self.key(DEFAULT_BACKEND), ing)))
        except InvalidContentError as e:
            self.logger.error(f"Error reading {self.name} on {ing}: {e}")
            return Resolved(value=ing.backend, error=e)

    def default(self, ing: Ingress) -> Resolved:
        return Resolved(value=ing.backend)
