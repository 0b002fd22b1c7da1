"""Decision engine for requests that no static file answered.

SPA mode on:  root index.html -> 200, otherwise 500 (misconfiguration).
SPA mode off: root 404.html   -> 404, otherwise the bundled 404 page.
"""
from __future__ import annotations

from functools import lru_cache
from importlib.resources import files
from pathlib import Path

from .outcomes import InternalError, NotFoundBuiltin, NotFoundCustom, SpaIndex
from .resources import read_file_bytes

__all__ = [
    "INDEX_FILE",
    "CUSTOM_404_FILE",
    "SPA_INDEX_MISSING",
    "FallbackOutcome",
    "bundled_page",
    "decide_fallback",
]

INDEX_FILE = "index.html"
CUSTOM_404_FILE = "404.html"
SPA_INDEX_MISSING = "SPA mode is enabled but index.html could not be found in the public directory"

FallbackOutcome = SpaIndex | NotFoundCustom | NotFoundBuiltin | InternalError


@lru_cache(maxsize=None)
def bundled_page(name: str) -> bytes:
    """Return a page shipped inside the package (templates/<name>)."""
    return files("jellyfish").joinpath("templates", name).read_bytes()


def _read_optional(target: Path) -> bytes | None:
    try:
        return read_file_bytes(target)
    except OSError:
        return None


def decide_fallback(root: Path, spa_mode: bool) -> FallbackOutcome:
    """Produce the final response for a static miss. Never raises OSError."""
    if spa_mode:
        index = _read_optional(root / INDEX_FILE)
        if index is None:
            return InternalError(SPA_INDEX_MISSING)
        return SpaIndex(index)

    custom = _read_optional(root / CUSTOM_404_FILE)
    if custom is not None:
        return NotFoundCustom(custom)
    return NotFoundBuiltin(bundled_page(CUSTOM_404_FILE))
