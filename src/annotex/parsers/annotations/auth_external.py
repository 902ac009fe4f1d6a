#!/usr/bin/env python3
"""
Parser for external (sub-request) authentication.

Extracts:
- <prefix>/auth-url: absolute http(s) URL of the auth service
- <prefix>/auth-method: HTTP method of the sub-request (optional)
- <prefix>/auth-send-body: forward the request body to the auth service
"""

from dataclasses import dataclass
from urllib.parse import urlparse

from annotex.core.errors import InvalidContentError
from annotex.models import Ingress
from annotex.parsers.annotations.base import (
    IngressAnnotation,
    get_bool_annotation,
    get_string_annotation,
)

AUTH_URL = "auth-url"
AUTH_METHOD = "auth-method"
AUTH_SEND_BODY = "auth-send-body"

VALID_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "CONNECT", "OPTIONS", "TRACE")


@dataclass(frozen=True)
class External:
    url: str = ""
    host: str = ""
    method: str = ""
    send_body: bool = False


class ExternalAuthParser(IngressAnnotation):
    name = "ExternalAuth"

    def parse(self, ing: Ingress) -> External:
        url = get_string_annotation(self.key(AUTH_URL), ing)
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https"):
            raise InvalidContentError(f"{AUTH_URL} '{url}' must use http or https")
        if not parsed.hostname:
            raise InvalidContentError(f"{AUTH_URL} '{url}' has no host")

        # An invalid method makes the whole feature unusable
        method = self.field_or_default(get_string_annotation, AUTH_METHOD, ing, "")
        if method and method not in VALID_METHODS:
            raise InvalidContentError(f"{AUTH_METHOD} '{method}' is not a valid HTTP method")

        return External(
            url=url,
            host=parsed.hostname,
            method=method,
            send_body=self.field_or_default(get_bool_annotation, AUTH_SEND_BODY, ing, False),
        )

    def default(self, ing: Ingress) -> External:
        return External()
