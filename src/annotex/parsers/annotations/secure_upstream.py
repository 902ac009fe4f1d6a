"""
Parser for the secure-backends annotation.

Extracts:
- <prefix>/secure-backends: "true" when the upstream speaks HTTPS
"""

from annotex.parsers.annotations.base import BoolAnnotation


class SecureUpstreamParser(BoolAnnotation):
    """Signals that traffic to the backend must be encrypted."""

    name = "SecureUpstream"
    suffix = "secure-backends"
