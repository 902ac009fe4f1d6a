#!/usr/bin/env python3
"""
ANNOTEX ANNOTATION PARSER INTERFACE
-----------------------------------
Abstract base class and strict value helpers for the per-feature parsers.

Every parser reads one or more `<prefix>/<suffix>` keys off an Ingress and
produces a typed value. Parsing is strict:
- booleans: only the literal strings "true" / "false"
- integers: optional minus sign followed by digits, nothing else
- strings: non-empty after stripping

A missing key and a malformed value are both resolved to the parser's
documented default; neither ever escapes `resolve()`.

Metadata:
    - Component: Annotation Parser Interface
    - Author: Annotex Team
    - License: Apache 2.0
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from annotex.core.errors import (
    AnnotationError,
    InvalidContentError,
    MissingAnnotationsError,
    ResolverError,
)
from annotex.core.resolver import ConfigurationProvider
from annotex.models import DefaultBackend, Ingress, Resolved

logger = logging.getLogger("annotex.annotations")

DEFAULT_PREFIX = "ingress.kubernetes.io"

_INT_PATTERN = re.compile(r"-?[0-9]+")
_INT_MIN, _INT_MAX = -(2 ** 63), 2 ** 63 - 1


def annotation_key(suffix: str, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}/{suffix}"


def _get_raw(key: str, ing: Ingress) -> str:
    annotations = ing.get_annotations()
    if not annotations:
        raise MissingAnnotationsError()
    if key not in annotations:
        raise MissingAnnotationsError(f"annotation {key} is not set")
    return annotations[key]


def get_string_annotation(key: str, ing: Ingress) -> str:
    value = _get_raw(key, ing).strip()
    if not value:
        raise InvalidContentError(f"annotation {key} is empty")
    return value


def get_bool_annotation(key: str, ing: Ingress) -> bool:
    value = _get_raw(key, ing)
    if value == "true":
        return True
    if value == "false":
        return False
    raise InvalidContentError(f"annotation {key} expects 'true' or 'false', got '{value}'")


def get_int_annotation(key: str, ing: Ingress) -> int:
    value = _get_raw(key, ing)
    if not _INT_PATTERN.fullmatch(value):
        raise InvalidContentError(f"annotation {key} expects an integer, got '{value}'")
    try:
        number = int(value)
    except ValueError as e:
        # digit-count limit on str -> int conversion
        raise InvalidContentError(f"annotation {key} is out of range") from e
    if not _INT_MIN <= number <= _INT_MAX:
        raise InvalidContentError(f"annotation {key} is out of range")
    return number


class IngressAnnotation(ABC):
    """
    Abstract base for a single feature parser.

    Subclasses set `name` (the feature key in the Result Model) and
    implement `parse` and `default`. Parsers hold only construction-time
    state, so one instance may serve concurrent extractions.
    """

    name: str = ""

    def __init__(self, provider: ConfigurationProvider, prefix: str = DEFAULT_PREFIX):
        self.provider = provider
        self.prefix = prefix
        self.logger = logging.getLogger(f"annotex.annotations.{self.name.lower()}")

    def key(self, suffix: str) -> str:
        return annotation_key(suffix, self.prefix)

    @abstractmethod
    def parse(self, ing: Ingress) -> Any:
        """
        Reads the feature off the resource.

        Raises:
            MissingAnnotationsError: none of the feature's keys are set.
            InvalidContentError: a value failed the strict format check.
        """
        pass

    @abstractmethod
    def default(self, ing: Ingress) -> Any:
        """The value used when the feature is unset or malformed."""
        pass

    def resolve(self, ing: Ingress) -> Any:
        """Parses the feature, falling back to the default on any annotation error."""
        try:
            return self.parse(ing)
        except MissingAnnotationsError as e:
            self.logger.debug(f"{self.name} not set on {ing}: {e}")
        except AnnotationError as e:
            self.logger.warning(f"Ignoring {self.name} on {ing}: {e}")
        return self.default(ing)

    # -------------------------------------------------------------------------
    # Helpers for multi-key features whose fields default independently
    # -------------------------------------------------------------------------

    def backend_defaults(self) -> DefaultBackend:
        """Cluster-wide defaults; an unreachable provider yields zero values."""
        try:
            return self.provider.get_default_backend() or DefaultBackend()
        except Exception as e:
            self.logger.error(f"Default backend unavailable for {self.name}: {e}")
            return DefaultBackend()

    def field_or_default(self, reader: Callable[[str, Ingress], Any], suffix: str,
                         ing: Ingress, fallback: Any) -> Any:
        """Reads one key; a missing or malformed value yields `fallback`."""
        key = self.key(suffix)
        try:
            return reader(key, ing)
        except MissingAnnotationsError:
            return fallback
        except InvalidContentError as e:
            self.logger.warning(f"Ignoring {key} on {ing}: {e}")
            return fallback


class BoolAnnotation(IngressAnnotation):
    """Single boolean key defaulting to False."""

    suffix: str = ""

    def parse(self, ing: Ingress) -> bool:
        return get_bool_annotation(self.key(self.suffix), ing)

    def default(self, ing: Ingress) -> bool:
        return False


class ResolvedAnnotation(IngressAnnotation):
    """
    Base for features that delegate to the Configuration Provider.

    The value is always a Resolved pair. An unset feature yields an empty
    Resolved; any other failure is kept as the pair's error so the consumer
    can decide whether the affected route may still be rendered.
    """

    def default(self, ing: Ingress) -> Resolved:
        return Resolved()

    def resolve(self, ing: Ingress) -> Resolved:
        try:
            return self.parse(ing)
        except MissingAnnotationsError as e:
            self.logger.debug(f"{self.name} not set on {ing}: {e}")
            return self.default(ing)
        except AnnotationError as e:
            self.logger.error(f"Error reading {self.name} on {ing}: {e}")
            return Resolved(error=e)

    def lookup(self, resolver: Callable[[str], Any], name: str, what: str) -> Any:
        """Calls a provider lookup, normalizing every failure to ResolverError."""
        try:
            found = resolver(name)
        except ResolverError:
            raise
        except Exception as e:
            raise ResolverError(f"unexpected error resolving {what} {name}: {e}") from e

        if found is None:
            raise ResolverError(f"{what} {name} was not found")
        return found


def qualify_name(value: str, namespace: str) -> str:
    """Prefixes a bare resource name with the resource's namespace."""
    return value if "/" in value else f"{namespace}/{value}"


def split_name(value: str) -> Optional[tuple]:
    """Splits "namespace/name"; returns None when the value is not in that form."""
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]
