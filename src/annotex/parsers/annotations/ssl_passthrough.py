"""
Parser for the ssl-passthrough annotation.

Extracts:
- <prefix>/ssl-passthrough: "true" to forward TLS untouched to the backend
"""

from annotex.parsers.annotations.base import BoolAnnotation


class SSLPassthroughParser(BoolAnnotation):
    name = "SSLPassthrough"
    suffix = "ssl-passthrough"
