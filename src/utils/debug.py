from __future__ import annotations

import sys

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def log(message: str) -> None:
    """Print a diagnostic line to stderr when verbose mode is on."""
    if _verbose:
        print(f"[polystroke] {message}", file=sys.stderr)
