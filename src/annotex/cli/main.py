#!/usr/bin/env python3
"""
ANNOTEX CLI
-----------
Inspects the configuration the annotation extractor derives from local
Ingress manifests.

Usage:
    annotex extract ./manifests
    annotex extract ingress.yaml secrets.yaml --json
"""

import argparse
import logging
import sys

from annotex.cli.commands.base import (
    CORE_VERSION,
    add_standard_flags,
    get_console,
    setup_logging,
    validate_required_arg,
)
from annotex.cli.commands.extract import handle_extract_command
from annotex.ui.formatter import AnnotexFormatter

console = get_console()
logger = logging.getLogger("annotex.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="annotex", description="Ingress annotation extractor")
    parser.add_argument("-v", "--version", action="store_true", help="Display version information")
    subparsers = parser.add_subparsers(dest="command")

    extract = subparsers.add_parser("extract", help="Extract typed configuration from Ingress annotations")
    add_standard_flags(extract)
    extract.add_argument("--json", action="store_true", help="Print results as JSON")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"annotex {CORE_VERSION}")
        sys.exit(0)

    if args.command != "extract":
        parser.print_help()
        sys.exit(1)

    setup_logging(args.verbose)

    if not validate_required_arg(args.path, "path", "extract", ["annotex extract .", "annotex extract ingress.yaml"]):
        sys.exit(1)

    try:
        sys.exit(handle_extract_command(args, AnnotexFormatter()))
    except Exception as e:
        console.print(f"[bold red]Fatal Error:[/bold red] {e}")
        logger.exception("extract failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
