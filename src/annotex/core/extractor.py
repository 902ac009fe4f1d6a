#!/usr/bin/env python3
"""
ANNOTEX ANNOTATION EXTRACTOR
----------------------------
Runs every registered feature parser over one Ingress and assembles their
outputs into a single, read-only result keyed by feature name.

Guarantees:
- Every registered feature name is present in the result, even on a
  resource with no annotations at all.
- A malformed annotation only affects its own feature.
- Provider failures stay scoped to their feature (see Resolved).
- Nothing raised by a parser unwinds past `extract()`.

The extractor holds no per-call state, so one instance may be shared by
concurrent reconciliation workers as long as its provider is thread-safe.

Metadata:
    - Component: Annotation Extractor
    - Author: Annotex Team
    - License: Apache 2.0
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator

from annotex.core.resolver import ConfigurationProvider
from annotex.models import Ingress, Resolved
from annotex.parsers.annotations import (
    DEFAULT_PREFIX,
    HealthCheckParser,
    SecureUpstreamParser,
    SSLPassthroughParser,
    get_parsers,
)
from annotex.parsers.annotations.health_check import Upstream

logger = logging.getLogger("annotex.extractor")


class ExtractedAnnotations(Mapping):
    """
    Immutable mapping of feature name -> feature value for one resource.
    Two results are equal when they hold equal values for the same features.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Dict[str, Any]):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self):
        return f"ExtractedAnnotations({dict(self._values)!r})"

    @property
    def errors(self) -> Dict[str, Exception]:
        """Feature-scoped errors from provider-backed features."""
        return {
            name: value.error
            for name, value in self._values.items()
            if isinstance(value, Resolved) and value.error is not None
        }

    def to_dict(self) -> dict:
        return dict(self._values)


class AnnotationExtractor:
    """
    Extracts typed configuration from Ingress annotations.

    Usage:
        extractor = AnnotationExtractor(provider)
        result = extractor.extract(ingress)
        result["HealthCheck"].max_fails
    """

    def __init__(self, provider: ConfigurationProvider, prefix: str = DEFAULT_PREFIX):
        self.provider = provider
        self.prefix = prefix
        self.annotations = get_parsers(provider, prefix)
        logger.debug(f"Registered {len(self.annotations)} annotation parsers (prefix: {prefix})")

    def extract(self, ing: Ingress) -> ExtractedAnnotations:
        values: Dict[str, Any] = {}
        for name, parser in self.annotations.items():
            try:
                value = parser.resolve(ing)
            except Exception as e:
                logger.exception(f"Parser {name} failed on {ing}: {e}")
                value = self._safe_default(name, ing)

            logger.debug(f"annotation {name} in {ing}: {value}")
            values[name] = value

        return ExtractedAnnotations(values)

    def _safe_default(self, name: str, ing: Ingress) -> Any:
        try:
            return self.annotations[name].default(ing)
        except Exception as e:
            # The default itself depends on the provider and may fail too
            logger.error(f"Default for {name} failed on {ing}: {e}")
            return Resolved(error=e)

    # -------------------------------------------------------------------------
    # Typed accessors
    # -------------------------------------------------------------------------

    def secure_upstream(self, ing: Ingress) -> bool:
        return self.annotations[SecureUpstreamParser.name].resolve(ing)

    def health_check(self, ing: Ingress) -> Upstream:
        return self.annotations[HealthCheckParser.name].resolve(ing)

    def ssl_passthrough(self, ing: Ingress) -> bool:
        return self.annotations[SSLPassthroughParser.name].resolve(ing)
