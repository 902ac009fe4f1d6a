"""
ANNOTEX ERRORS
--------------
Exception hierarchy shared by the annotation parsers and the provider.

- MissingAnnotationsError: the key is not set (resolved to a default)
- InvalidContentError: the value does not pass the strict format check
- ResolverError: the Configuration Provider could not resolve a reference

Errors compare by type and message so that two extraction passes over the
same resource produce equal results.
"""


class AnnotationError(Exception):
    """Base class for every error raised while reading annotations."""

    def __eq__(self, other):
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self).__name__, self.args))


class MissingAnnotationsError(AnnotationError):
    def __init__(self, message: str = "ingress rule without annotations"):
        super().__init__(message)


class InvalidContentError(AnnotationError):
    def __init__(self, message: str = "invalid annotation content"):
        super().__init__(message)


class ResolverError(AnnotationError):
    """Raised by providers when a secret or certificate lookup fails."""
    pass
