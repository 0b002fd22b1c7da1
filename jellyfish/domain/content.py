"""Stateless helpers over file bytes and file names."""
from __future__ import annotations

import mimetypes

import xxhash

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "content_hash",
    "guess_content_type",
]

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Platform mime tables differ; pin the types browsers care about.
for _type, _ext in (
    ("text/html", ".html"),
    ("text/html", ".htm"),
    ("text/css", ".css"),
    ("text/javascript", ".js"),
    ("text/javascript", ".mjs"),
    ("application/json", ".json"),
    ("image/svg+xml", ".svg"),
    ("image/webp", ".webp"),
    ("font/woff2", ".woff2"),
    ("application/wasm", ".wasm"),
):
    mimetypes.add_type(_type, _ext)


def content_hash(data: bytes) -> str:
    """Return the xxHash64 (seed 0) of `data` as 16 lowercase hex digits."""
    return xxhash.xxh64(data, seed=0).hexdigest()


def guess_content_type(name: str) -> str:
    """Guess a MIME type from the file extension, octet-stream if unknown."""
    guessed, _ = mimetypes.guess_type(name, strict=False)
    return guessed or DEFAULT_CONTENT_TYPE
