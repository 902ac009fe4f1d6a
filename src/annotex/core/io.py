"""
ANNOTEX MANIFEST LOADER
-----------------------
Reads Ingress and Secret manifests from local YAML files.
- Multi-document files (---) are split into documents
- Directories are expanded to their *.yaml / *.yml files
- `kind: List` documents are flattened into their items
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from annotex.models import Ingress, Secret

logger = logging.getLogger("annotex.io")

YAML_SUFFIXES = (".yaml", ".yml")


def _expand(paths: Iterable[Path]) -> Iterator[Path]:
    for path in paths:
        path = Path(path)
        if path.is_dir():
            yield from sorted(p for p in path.rglob("*") if p.suffix in YAML_SUFFIXES and p.is_file())
        elif path.exists():
            yield path
        else:
            logger.warning(f"Skipping missing path: {path}")


def load_manifests(paths: Iterable[Path]) -> Iterator[Tuple[Path, Dict[str, Any]]]:
    """Yields (path, document) for every mapping document found."""
    yaml = YAML(typ='safe')

    for path in _expand(paths):
        try:
            docs = list(yaml.load_all(path.read_text(encoding='utf-8-sig')))
        except (YAMLError, OSError) as e:
            logger.warning(f"Failed to parse {path}: {e}")
            continue

        for doc in docs:
            if not isinstance(doc, dict):
                continue
            if doc.get("kind") == "List":
                for item in doc.get("items") or []:
                    if isinstance(item, dict):
                        yield path, item
                continue
            yield path, doc


def collect_resources(paths: Iterable[Path]) -> Tuple[List[Ingress], List[Secret]]:
    """Splits the loaded documents into Ingress and Secret objects."""
    ingresses: List[Ingress] = []
    secrets: List[Secret] = []

    for path, doc in load_manifests(paths):
        kind = doc.get("kind")
        if kind == "Ingress":
            ingresses.append(Ingress.from_manifest(doc))
        elif kind == "Secret":
            secrets.append(Secret.from_manifest(doc))
        else:
            logger.debug(f"Ignoring {kind or 'unknown'} document in {path}")

    logger.info(f"Loaded {len(ingresses)} ingresses and {len(secrets)} secrets")
    return ingresses, secrets
