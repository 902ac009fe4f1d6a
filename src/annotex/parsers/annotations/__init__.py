#!/usr/bin/env python3
"""
Feature parsers for Ingress annotations.

Each parser owns one configuration facet and is registered here under the
feature name used as key in the extraction result.

Architecture:
- AnnotationExtractor handles orchestration and result assembly
- Parsers handle reading, validating and defaulting one feature
- Parsers are independent: no parser reads another one's output

Author: Annotex Team
Date: 2026-10-19
"""

from typing import Dict

from annotex.core.resolver import ConfigurationProvider

from .base import DEFAULT_PREFIX, IngressAnnotation, ResolvedAnnotation, annotation_key
from .auth_basic import BasicDigestAuthParser
from .auth_external import ExternalAuthParser
from .auth_tls import AuthTLSParser
from .cors import CORSParser
from .default_backend import DefaultBackendParser
from .health_check import HealthCheckParser
from .ip_whitelist import IPWhitelistParser
from .port_in_redirect import PortInRedirectParser
from .proxy import ProxyParser
from .rate_limit import RateLimitParser
from .rewrite import RewriteParser
from .secure_upstream import SecureUpstreamParser
from .session_affinity import SessionAffinityParser
from .ssl_passthrough import SSLPassthroughParser

PARSER_CLASSES = (
    BasicDigestAuthParser,
    ExternalAuthParser,
    AuthTLSParser,
    CORSParser,
    DefaultBackendParser,
    HealthCheckParser,
    IPWhitelistParser,
    PortInRedirectParser,
    ProxyParser,
    RateLimitParser,
    RewriteParser,
    SecureUpstreamParser,
    SessionAffinityParser,
    SSLPassthroughParser,
)

FEATURE_NAMES = tuple(cls.name for cls in PARSER_CLASSES)


def get_parsers(provider: ConfigurationProvider, prefix: str = DEFAULT_PREFIX) -> Dict[str, IngressAnnotation]:
    """
    Returns one instance of every feature parser, keyed by feature name.

    Order doesn't matter since parsers never depend on each other.
    """
    return {cls.name: cls(provider, prefix) for cls in PARSER_CLASSES}


__all__ = [
    'DEFAULT_PREFIX',
    'FEATURE_NAMES',
    'IngressAnnotation',
    'ResolvedAnnotation',
    'annotation_key',
    'get_parsers',
    'BasicDigestAuthParser',
    'ExternalAuthParser',
    'AuthTLSParser',
    'CORSParser',
    'DefaultBackendParser',
    'HealthCheckParser',
    'IPWhitelistParser',
    'PortInRedirectParser',
    'ProxyParser',
    'RateLimitParser',
    'RewriteParser',
    'SecureUpstreamParser',
    'SessionAffinityParser',
    'SSLPassthroughParser',
]
