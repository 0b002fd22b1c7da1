#!/usr/bin/env python3
"""End-to-end smoke run against a live jellyfish server.

Steps:
- wait for the server to answer
- send a fixed set of probes (root, ?info, ?list, traversal, unknown path)
- log a JSON summary and exit non-zero on any mismatch

    python tools/fixtures.py
    PUBLIC_DIR=fixtures/public jellyfish &
    python -m runner.smoke
"""
from __future__ import annotations

import asyncio
import sys
from uuid import uuid4

from jellyfish.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import run_probes, wait_for_server
from runner.types import Probe, ProbeResult

setup_logging()
logger = get_logger("runner")


def build_probes(*, spa: bool, info_path: str, list_path: str) -> list[Probe]:
    """Expected statuses for each probe, depending on SPA mode.

    In SPA mode ?info and ?list are ignored, so they resolve like plain GETs.
    """
    missing = f"/missing-{uuid4().hex}"
    probes = [
        Probe("root", "/", 200),
        Probe("traversal", "/..%2f..%2fetc%2fpasswd", 403),
        Probe("unknown_path", missing, 200 if spa else 404),
    ]
    if spa:
        probes.append(Probe("info_ignored", f"{missing}?info", 200))
    else:
        probes += [
            Probe("file_info", f"{info_path}?info", 200, expect_json=True),
            Probe("list_dir", f"{list_path}?list", 200, expect_json=True),
            Probe("info_on_dir", f"{list_path}?info", 400, expect_json=True),
            Probe("info_missing", f"{missing}?info", 404, expect_json=True),
        ]
    return probes


def summarize(results: list[ProbeResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from probe results."""
    failures = [
        {
            "probe": r.probe.name,
            "path": r.probe.path,
            "expected": r.probe.expected_status,
            "got": r.status_code,
            "error": r.error,
        }
        for r in results
        if not r.ok
    ]
    summary = {
        "component": "runner",
        "event": "summary",
        "probes": len(results),
        "passed": len(results) - len(failures),
        "failed": len(failures),
        "max_ms": max((r.elapsed_ms for r in results), default=0.0),
        "failures": failures,
    }
    return summary, 0 if not failures else 1


async def run_smoke(*, base_url: str, spa: bool, info_path: str, list_path: str, timeout_s: float) -> int:
    await wait_for_server(base_url, timeout_s)
    probes = build_probes(spa=spa, info_path=info_path, list_path=list_path)
    results = await run_probes(base_url, probes)
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv or sys.argv[1:])
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            spa=args.spa,
            info_path=args.info_path,
            list_path=args.list_path,
            timeout_s=args.timeout,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
