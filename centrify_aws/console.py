# ABOUTME: Terminal output helpers shared by the pipeline and the CLI
# ABOUTME: Everything human-readable goes to stderr; stdout carries only the export line

"""Stderr console and debug output."""

import os

from rich.console import Console
from rich.markup import escape

DEBUG_ENV_VAR = "CENTRIFY_AWS_DEBUG"

# stdout is evaluated by the calling shell
err_console = Console(stderr=True, highlight=False)

_debug_forced = False


def set_debug(enabled: bool) -> None:
    """Force debug output on for this process (the --debug flag)."""
    global _debug_forced
    _debug_forced = enabled


def debug_enabled() -> bool:
    return _debug_forced or os.getenv(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes")


def debug_print(message: str) -> None:
    """Print debug message only if debug mode is enabled"""
    if debug_enabled():
        err_console.print(f"[dim]Debug: {escape(message)}[/dim]")
