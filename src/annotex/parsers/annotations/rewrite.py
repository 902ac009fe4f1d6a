#!/usr/bin/env python3
"""
Parser for location rewrites and HTTPS redirection.

Extracts:
- <prefix>/rewrite-target: URI the matched path is rewritten to
- <prefix>/add-base-url: inject a <base> tag when rewriting
- <prefix>/ssl-redirect: redirect HTTP to HTTPS (backend default otherwise)
"""

from dataclasses import dataclass

from annotex.models import Ingress
from annotex.parsers.annotations.base import (
    IngressAnnotation,
    get_bool_annotation,
    get_string_annotation,
)

REWRITE_TARGET = "rewrite-target"
ADD_BASE_URL = "add-base-url"
SSL_REDIRECT = "ssl-redirect"


@dataclass(frozen=True)
class Redirect:
    target: str = ""
    add_base_url: bool = False
    ssl_redirect: bool = False


class RewriteParser(IngressAnnotation):
    name = "Redirect"

    def parse(self, ing: Ingress) -> Redirect:
        ssl_default = self.backend_defaults().ssl_redirect
        return Redirect(
            target=self.field_or_default(get_string_annotation, REWRITE_TARGET, ing, ""),
            add_base_url=self.field_or_default(get_bool_annotation, ADD_BASE_URL, ing, False),
            ssl_redirect=self.field_or_default(get_bool_annotation, SSL_REDIRECT, ing, ssl_default),
        )

    def default(self, ing: Ingress) -> Redirect:
        return Redirect(ssl_redirect=self.backend_defaults().ssl_redirect)
