"""
CLI SHARED UTILITIES
--------------------
Common logic used across CLI commands.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

console = Console(stderr=True)

CORE_VERSION = "0.1.0"


def get_console():
    return console


def add_standard_flags(sub):
    """Helper to inject path arguments and shared options into sub-parsers."""
    sub.add_argument("path", nargs="*", metavar="TARGET", help="Manifest file(s) or directory(s) to read")
    sub.add_argument("--config", default=None, metavar="FILE", help="Path to an .annotex.yaml configuration file")
    sub.add_argument("--verbose", action="store_true", help="Show debug logs for every parsed feature")


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def validate_required_arg(value, arg_name: str, context: str, examples: list):
    """
    Validates that a required argument is present.
    If missing, prints an error panel and returns False.
    """
    if value:
        return True

    error_msg = f"[bold red]Missing Required Argument: {arg_name}[/bold red]\n\n"
    error_msg += f"The [bold]{context}[/bold] command requires a specific target.\n"
    if examples:
        error_msg += "\n[dim italic]Try:[/dim italic]\n"
        for ex in examples:
            error_msg += f"  [cyan]{ex}[/cyan]\n"

    console.print(Panel(error_msg, border_style="red", title="[bold yellow]Input Error[/bold yellow]", expand=False))
    return False
