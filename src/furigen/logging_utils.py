from __future__ import annotations

from rich.console import Console

__all__ = [
    "set_debug_logging",
    "debug_log",
    "make_console",
]

_DEBUG_LOG = False


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def debug_log(message: str) -> None:
    if _DEBUG_LOG:
        print(f"[furigen debug] {message}")


def make_console(quiet: bool = False) -> Console:
    """Console for operator output; progress lines go to stderr so stdout stays clean."""
    return Console(stderr=True, quiet=quiet, highlight=False)
