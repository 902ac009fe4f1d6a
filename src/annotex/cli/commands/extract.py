"""
EXTRACT COMMAND
---------------
Loads Ingress and Secret manifests from disk, runs the annotation extractor
over every Ingress and prints the typed result (read-only).
"""

import logging
from pathlib import Path

from annotex.cli.commands.base import get_console
from annotex.core.config import ConfigManager
from annotex.core.extractor import AnnotationExtractor
from annotex.core.io import collect_resources
from annotex.core.resolver import ManifestProvider

logger = logging.getLogger("annotex.cli.extract")


def handle_extract_command(args, formatter) -> int:
    """
    Handles 'extract' subcommand execution.

    Returns:
        int: process exit code (1 when no Ingress was found)
    """
    config = ConfigManager(Path.cwd(), config_path=Path(args.config) if args.config else None)
    ingresses, secrets = collect_resources(Path(p) for p in args.path)

    if not ingresses:
        get_console().print("[yellow]No Ingress resources found in the given targets.[/yellow]")
        return 1

    provider = ManifestProvider(backend=config.default_backend(), secrets=secrets)
    extractor = AnnotationExtractor(provider, prefix=config.annotation_prefix)

    results = [(ing, extractor.extract(ing)) for ing in ingresses]

    if getattr(args, "json", False):
        print(formatter.render_json(results))
        return 0

    for ing, result in results:
        formatter.display_result(ing, result)
    formatter.display_summary(len(results), sum(1 for _, r in results if r.errors))
    return 0
