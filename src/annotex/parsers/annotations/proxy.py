#!/usr/bin/env python3
"""
Parser for per-location proxy tuning.

Extracts:
- <prefix>/proxy-connect-timeout (seconds)
- <prefix>/proxy-send-timeout (seconds)
- <prefix>/proxy-read-timeout (seconds)
- <prefix>/proxy-buffer-size (size string, e.g. "8k")
- <prefix>/proxy-body-size (size string, e.g. "1m")

Fields absent or malformed on the resource fall back to the provider's
backend settings one by one.
"""

from dataclasses import dataclass

from annotex.models import Ingress
from annotex.parsers.annotations.base import (
    IngressAnnotation,
    get_int_annotation,
    get_string_annotation,
)

CONNECT_TIMEOUT = "proxy-connect-timeout"
SEND_TIMEOUT = "proxy-send-timeout"
READ_TIMEOUT = "proxy-read-timeout"
BUFFER_SIZE = "proxy-buffer-size"
BODY_SIZE = "proxy-body-size"


@dataclass(frozen=True)
class ProxyConfig:
    body_size: str = ""
    connect_timeout: int = 0
    send_timeout: int = 0
    read_timeout: int = 0
    buffer_size: str = ""


class ProxyParser(IngressAnnotation):
    name = "Proxy"

    def parse(self, ing: Ingress) -> ProxyConfig:
        defaults = self.backend_defaults()
        return ProxyConfig(
            body_size=self.field_or_default(get_string_annotation, BODY_SIZE, ing, defaults.proxy_body_size),
            connect_timeout=self.field_or_default(
                get_int_annotation, CONNECT_TIMEOUT, ing, defaults.proxy_connect_timeout
            ),
            send_timeout=self.field_or_default(get_int_annotation, SEND_TIMEOUT, ing, defaults.proxy_send_timeout),
            read_timeout=self.field_or_default(get_int_annotation, READ_TIMEOUT, ing, defaults.proxy_read_timeout),
            buffer_size=self.field_or_default(
                get_string_annotation, BUFFER_SIZE, ing, defaults.proxy_buffer_size
            ),
        )

    def default(self, ing: Ingress) -> ProxyConfig:
        defaults = self.backend_defaults()
        return ProxyConfig(
            body_size=defaults.proxy_body_size,
            connect_timeout=defaults.proxy_connect_timeout,
            send_timeout=defaults.proxy_send_timeout,
            read_timeout=defaults.proxy_read_timeout,
            buffer_size=defaults.proxy_buffer_size,
        )
