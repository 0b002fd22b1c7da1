from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Jellyfish smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:33433"))
    parser.add_argument(
        "--spa",
        action="store_true",
        default=os.getenv("SPA_MODE", "").lower() in {"1", "true", "yes", "on"},
        help="expect SPA fallback behaviour",
    )
    parser.add_argument("--info-path", default="/docs/report.pdf", help="an existing file")
    parser.add_argument("--list-path", default="/", help="an existing directory")
    parser.add_argument("--timeout", type=float, default=20.0)
    return parser.parse_args(argv)
