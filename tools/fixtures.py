#!/usr/bin/env python3
"""Write a demo public directory under fixtures/public for local runs.

    python tools/fixtures.py
    PUBLIC_DIR=fixtures/public jellyfish
"""
from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PUBLIC = ROOT / "fixtures" / "public"

# 1024 bytes: a tiny PDF header padded out, so `?info` reports a round size.
_PDF = b"%PDF-1.1\n% jellyfish fixture\n"
_PDF = _PDF + b"%" * (1024 - len(_PDF) - len(b"\n%%EOF\n")) + b"\n%%EOF\n"

FILES = [
    (PUBLIC / "index.html", b"<!doctype html><title>fixture</title><div id=\"app\">home</div>"),
    (PUBLIC / "404.html", b"<!doctype html><title>missing</title><p>custom not found</p>"),
    (PUBLIC / "assets" / "app.js", b"console.log('fixture');\n"),
    (PUBLIC / "assets" / "style.css", b"body { margin: 0; }\n"),
    (PUBLIC / "docs" / "report.pdf", _PDF),
    (PUBLIC / "docs" / "notes" / "index.html", b"<!doctype html><p>notes index</p>"),
    (PUBLIC / "data" / "config.json", b"{\n  \"ok\": true\n}\n"),
]


def main() -> None:
    for path, data in FILES:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    created = [str(p.relative_to(ROOT)) for p, _ in FILES if p.exists()]
    print("Created fixtures:")
    for c in created:
        print(" -", c)
    if len(created) != len(FILES):
        raise SystemExit(f"Expected {len(FILES)} fixtures, found {len(created)}")


if __name__ == "__main__":
    main()
