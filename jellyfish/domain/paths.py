from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote_to_bytes

__all__ = [
    "ForbiddenPathError",
    "SanitizedPath",
    "sanitize",
]


class ForbiddenPathError(ValueError):
    """Raised when a request path would leave the serving root."""


@dataclass(frozen=True)
class SanitizedPath:
    """Root-relative path made of plain segments (no "", "." or "..")."""

    segments: tuple[str, ...] = ()

    @property
    def relative(self) -> str:
        """Root-relative form without a leading slash ("" for the root)."""
        return "/".join(self.segments)

    @property
    def request_path(self) -> str:
        """Normalized path as a client would address it ("/docs/a.txt")."""
        return "/" + self.relative

    @property
    def quoted(self) -> str:
        """Percent-encoded form; sanitize(p.quoted) == p for every result."""
        return "/" + "/".join(quote(s, safe="") for s in self.segments)

    def join(self, root: Path) -> Path:
        return root.joinpath(*self.segments)


def _decode(raw: str | bytes) -> str:
    # Percent-decode to bytes first so invalid UTF-8 is replaced, not fatal.
    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="surrogatepass")
    return unquote_to_bytes(raw).decode("utf-8", errors="replace")


def sanitize(raw_path: str | bytes) -> SanitizedPath:
    """Turn a raw URI path into a traversal-free, root-relative path.

    Rules:
    - Percent-decode first (lossy UTF-8), so encoded "..%2f" is caught.
    - Treat backslashes as separators.
    - Drop empty and "." segments; resolve ".." lexically.
    - A ".." that would climb above the root is rejected.

    Raises:
        ForbiddenPathError: on root escape or an embedded NUL byte.
    """
    decoded = _decode(raw_path).replace("\\", "/")
    if "\x00" in decoded:
        raise ForbiddenPathError("path contains a NUL byte")

    segments: list[str] = []
    for seg in decoded.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if not segments:
                raise ForbiddenPathError("path escapes the serving root")
            segments.pop()
            continue
        segments.append(seg)
    return SanitizedPath(tuple(segments))
