#!/usr/bin/env python3
"""
ANNOTEX CORE MODELS
-------------------
Defines the data structures shared by the parsers, the extractor and the
Configuration Provider. These models are the "Data Contract" between the
resource loader, the annotation parsers and the downstream config renderer.

- Ingress: the routing resource (identity, annotations, rules, backend)
- Secret / AuthSSLCert: credential handles returned by the provider
- DefaultBackend: cluster-wide defaults used when an annotation is absent
- Resolved: value + optional error pair for provider-backed features

Author: Annotex Team
Date: 2026-10-19
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger("annotex.models")

DEFAULT_NAMESPACE = "default"


def _annotation_value(value: Any) -> str:
    """Renders an unquoted YAML scalar the way it was written."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class IngressBackend:
    """A logical backend reference (service + port)."""
    service_name: str
    service_port: Union[int, str, None] = None

    def __str__(self):
        if self.service_port is None:
            return self.service_name
        return f"{self.service_name}:{self.service_port}"

    @classmethod
    def from_manifest(cls, raw: Optional[Dict[str, Any]]) -> Optional["IngressBackend"]:
        """
        Parses both backend shapes:
        - extensions/v1beta1: {serviceName, servicePort}
        - networking.k8s.io/v1: {service: {name, port: {number|name}}}
        """
        if not isinstance(raw, dict):
            return None

        if "serviceName" in raw:
            return cls(service_name=str(raw["serviceName"]), service_port=raw.get("servicePort"))

        service = raw.get("service")
        if isinstance(service, dict) and service.get("name"):
            port = service.get("port") or {}
            port_value = port.get("number", port.get("name")) if isinstance(port, dict) else None
            return cls(service_name=str(service["name"]), service_port=port_value)

        return None


@dataclass(frozen=True)
class IngressPath:
    path: str
    backend: Optional[IngressBackend] = None


@dataclass
class IngressRule:
    host: str = ""
    paths: List[IngressPath] = field(default_factory=list)


@dataclass
class IngressTLS:
    hosts: List[str] = field(default_factory=list)
    secret_name: str = ""


@dataclass
class Ingress:
    """
    The routing resource handed to the extractor.

    The annotation mapping may be None. That is a valid input and means
    "no annotations set", never an error.
    """
    name: str
    namespace: str = DEFAULT_NAMESPACE
    annotations: Optional[Dict[str, str]] = None
    backend: Optional[IngressBackend] = None
    rules: List[IngressRule] = field(default_factory=list)
    tls: List[IngressTLS] = field(default_factory=list)

    def get_annotations(self) -> Optional[Dict[str, str]]:
        return self.annotations

    def set_annotations(self, annotations: Optional[Dict[str, str]]) -> None:
        self.annotations = annotations

    @property
    def key(self) -> str:
        """namespace/name identifier used in logs and zone names."""
        return f"{self.namespace}/{self.name}"

    def __str__(self):
        return f"Ingress/{self.key}"

    @classmethod
    def from_manifest(cls, doc: Dict[str, Any]) -> "Ingress":
        """
        Builds an Ingress from a decoded manifest document.
        Annotation values are coerced to strings, like the API server does.
        """
        metadata = doc.get("metadata") or {}
        spec = doc.get("spec") or {}

        raw_annotations = metadata.get("annotations")
        annotations = None
        if isinstance(raw_annotations, dict):
            annotations = {str(k): _annotation_value(v) for k, v in raw_annotations.items()}

        # v1 renamed spec.backend to spec.defaultBackend
        backend = IngressBackend.from_manifest(spec.get("backend") or spec.get("defaultBackend"))

        rules = []
        for raw_rule in spec.get("rules") or []:
            http = raw_rule.get("http") or {}
            paths = [
                IngressPath(
                    path=str(p.get("path", "/")),
                    backend=IngressBackend.from_manifest(p.get("backend")),
                )
                for p in http.get("paths") or []
            ]
            rules.append(IngressRule(host=str(raw_rule.get("host", "")), paths=paths))

        tls = [
            IngressTLS(hosts=list(t.get("hosts") or []), secret_name=str(t.get("secretName", "")))
            for t in spec.get("tls") or []
        ]

        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace") or DEFAULT_NAMESPACE),
            annotations=annotations,
            backend=backend,
            rules=rules,
            tls=tls,
        )


@dataclass(frozen=True)
class Secret:
    """Decoded Kubernetes Secret. `data` holds raw bytes per key."""
    name: str
    namespace: str = DEFAULT_NAMESPACE
    data: Dict[str, bytes] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_manifest(cls, doc: Dict[str, Any]) -> "Secret":
        metadata = doc.get("metadata") or {}
        data: Dict[str, bytes] = {}

        for k, v in (doc.get("data") or {}).items():
            try:
                data[str(k)] = base64.b64decode(str(v), validate=True)
            except ValueError as e:
                logger.warning(f"Skipping undecodable key '{k}' in Secret {metadata.get('name')}: {e}")

        # stringData wins over data, as on the API server
        for k, v in (doc.get("stringData") or {}).items():
            data[str(k)] = str(v).encode("utf-8")

        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace") or DEFAULT_NAMESPACE),
            data=data,
        )


@dataclass(frozen=True)
class AuthSSLCert:
    """CA certificate used to verify client certificates."""
    secret: str
    ca_file_name: str
    pem_sha: str


@dataclass(frozen=True)
class DefaultBackend:
    """
    Cluster-wide defaults consulted when a resource does not override a
    setting. A zero-valued instance is a valid configuration.
    """
    upstream_max_fails: int = 0
    upstream_fail_timeout: int = 0
    proxy_connect_timeout: int = 0
    proxy_send_timeout: int = 0
    proxy_read_timeout: int = 0
    proxy_buffer_size: str = ""
    proxy_body_size: str = ""
    ssl_redirect: bool = False
    use_port_in_redirects: bool = False
    whitelist_source_range: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Resolved:
    """
    Result of a provider-backed feature: the value plus the error that
    prevented resolving it, if any. Inspected explicitly by the consumer.
    """
    value: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
