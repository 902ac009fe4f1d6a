"""
ANNOTEX CONFIGURATION MANAGER
-----------------------------
Handles loading and parsing of user configuration (.annotex.yaml).
Allows customization of:
- The annotation key prefix
- Cluster-wide backend defaults used when a resource sets no annotation
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from annotex.core.errors import InvalidContentError
from annotex.models import DefaultBackend
from annotex.parsers.annotations.base import DEFAULT_PREFIX
from annotex.parsers.annotations.ip_whitelist import parse_cidrs

logger = logging.getLogger("annotex.config")

# config key -> (DefaultBackend field, expected type)
BACKEND_FIELDS = {
    "upstream-max-fails": ("upstream_max_fails", int),
    "upstream-fail-timeout": ("upstream_fail_timeout", int),
    "proxy-connect-timeout": ("proxy_connect_timeout", int),
    "proxy-send-timeout": ("proxy_send_timeout", int),
    "proxy-read-timeout": ("proxy_read_timeout", int),
    "proxy-buffer-size": ("proxy_buffer_size", str),
    "proxy-body-size": ("proxy_body_size", str),
    "ssl-redirect": ("ssl_redirect", bool),
    "use-port-in-redirects": ("use_port_in_redirects", bool),
    "whitelist-source-range": ("whitelist_source_range", list),
}


class ConfigManager:
    """
    Manages user configuration state.
    defaults:
      annotations.prefix: ingress.kubernetes.io
      backend: proxy timeouts 5/60/60, ssl-redirect on
    """

    DEFAULT_CONFIG = {
        "annotations": {
            "prefix": DEFAULT_PREFIX,
        },
        "backend": {
            "upstream-max-fails": 0,
            "upstream-fail-timeout": 0,
            "proxy-connect-timeout": 5,
            "proxy-send-timeout": 60,
            "proxy-read-timeout": 60,
            "proxy-buffer-size": "4k",
            "proxy-body-size": "1m",
            "ssl-redirect": True,
            "use-port-in-redirects": False,
            "whitelist-source-range": [],
        },
    }

    def __init__(self, workspace_root: Path, config_path: Optional[Path] = None, app_name: str = "annotex"):
        self.workspace = Path(workspace_root)
        self.app_name = app_name
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.source: Optional[Path] = None
        self._load_config(config_path)

    def _load_config(self, config_path: Optional[Path] = None):
        """
        Attempts to load configuration from:
        1. An explicit path (--config)
        2. .<app_name>/config.yaml
        3. .<app_name>.yaml (Root file)
        """
        yaml = YAML(typ='safe')

        possible_files = [
            self.workspace / f".{self.app_name}" / "config.yaml",
            self.workspace / f".{self.app_name}.yaml",
        ]
        if config_path:
            possible_files.insert(0, Path(config_path))

        for path in possible_files:
            if path.exists():
                try:
                    loaded = yaml.load(path)
                    if isinstance(loaded, dict):
                        self._merge_config(loaded)
                    self.source = path
                    logger.info(f"Loaded configuration from {path.name}")
                except (YAMLError, OSError) as e:
                    logger.warning(f"Failed to parse {path.name}: {e}")
                return

        if config_path:
            logger.warning(f"Configuration file {config_path} not found, using defaults")

    def _merge_config(self, user_config: Dict[str, Any]):
        """Merges known sections; unknown or mistyped keys are ignored."""
        annotations = self._section(user_config, "annotations")
        prefix = annotations.get("prefix")
        if prefix:
            self.config["annotations"]["prefix"] = str(prefix).strip().rstrip("/")

        backend = self._section(user_config, "backend")
        for key, value in backend.items():
            if key not in BACKEND_FIELDS:
                logger.warning(f"Unknown backend setting '{key}' ignored")
                continue

            _, expected = BACKEND_FIELDS[key]
            # bool is an int subclass; keep the two apart
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                logger.warning(f"Backend setting '{key}' expects {expected.__name__}, got {value!r}")
                continue
            self.config["backend"][key] = value

    @staticmethod
    def _section(user_config: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = user_config.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            logger.warning(f"Config section '{name}' must be a mapping, got {section!r}; using defaults")
            return {}
        return section

    @property
    def annotation_prefix(self) -> str:
        return self.config["annotations"]["prefix"]

    def default_backend(self) -> DefaultBackend:
        backend = self.config["backend"]
        values = {field: backend[key] for key, (field, _) in BACKEND_FIELDS.items()}

        ranges = values["whitelist_source_range"]
        try:
            values["whitelist_source_range"] = parse_cidrs(",".join(str(r) for r in ranges)) if ranges else []
        except InvalidContentError as e:
            logger.warning(f"Ignoring invalid whitelist-source-range: {e}")
            values["whitelist_source_range"] = []

        return DefaultBackend(**values)
