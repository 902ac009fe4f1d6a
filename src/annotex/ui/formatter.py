#!/usr/bin/env python3
"""
ANNOTEX FORMATTER
-----------------
Renders extraction results using 'rich' (one table per Ingress) and
serializes them to JSON-ready structures for machine consumers.

Author: Annotex Team
Date: 2026-10-19
"""

import dataclasses
import json
from typing import Any, Dict, List, Tuple

from rich.console import Console
from rich.table import Table

from annotex.core.extractor import ExtractedAnnotations
from annotex.models import Ingress, Resolved

console = Console()


def to_jsonable(value: Any) -> Any:
    """Converts feature values to plain JSON types. Raw credentials are redacted."""
    if isinstance(value, Resolved):
        return {"value": to_jsonable(value.value), "error": str(value.error) if value.error else None}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: "<redacted>" if isinstance(getattr(value, f.name), bytes) else to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, bytes):
        return "<redacted>"
    if isinstance(value, Exception):
        return str(value)
    return value


class AnnotexFormatter:
    """Renders extraction reports for the CLI."""

    def __init__(self, out: Console = None):
        self.console = out or console

    def display_result(self, ing: Ingress, result: ExtractedAnnotations):
        annotations = ing.get_annotations() or {}
        table = Table(
            title=f"[bold cyan]{ing}[/bold cyan] [dim]({len(annotations)} annotations)[/dim]",
            show_lines=False,
        )
        table.add_column("Feature", style="bold green", no_wrap=True)
        table.add_column("Value", style="white")
        table.add_column("Error", style="red")

        for name in sorted(result):
            value = result[name]
            error = ""
            if isinstance(value, Resolved):
                error = str(value.error) if value.error else ""
                value = value.value
            table.add_row(name, "-" if value is None else repr(value), error)

        self.console.print(table)

    def display_summary(self, processed: int, with_errors: int):
        color = "green" if with_errors == 0 else "yellow"
        self.console.print(
            f"\n[bold {color}]Processed {processed} ingress(es), {with_errors} with feature errors[/bold {color}]"
        )

    @staticmethod
    def render_json(results: List[Tuple[Ingress, ExtractedAnnotations]]) -> str:
        payload: List[Dict[str, Any]] = []
        for ing, result in results:
            payload.append({
                "namespace": ing.namespace,
                "name": ing.name,
                "annotations": to_jsonable(result.to_dict()),
                "errors": {name: str(err) for name, err in result.errors.items()},
            })
        return json.dumps(payload, indent=2, sort_keys=True)
