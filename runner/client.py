from __future__ import annotations

import asyncio
import time

import httpx

from jellyfish.logging_conf import get_logger
from runner.types import Probe, ProbeResult, ServerUnavailableError

logger = get_logger("runner.client")


async def wait_for_server(base_url: str, timeout_s: float = 20.0) -> None:
    """Poll GET / until the server answers with a non-5xx status.

    Connection errors are expected while the server is still starting.
    """
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/")
            except httpx.TransportError:
                await asyncio.sleep(0.25)
                continue
            if r.status_code < 500:
                logger.info("server.ready", extra={"event": "server_ready", "status_code": r.status_code})
                return
            await asyncio.sleep(0.25)
    raise ServerUnavailableError(f"{base_url} did not become ready within {timeout_s}s")


async def run_probe(client: httpx.AsyncClient, probe: Probe, *, retries: int = 2) -> ProbeResult:
    """Send one probe, retrying transport errors only."""
    last_err: Exception | None = None
    for attempt in range(retries):
        start = time.perf_counter()
        try:
            r = await client.get(probe.path)
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "probe.retry",
                extra={"event": "probe_retry", "probe": probe.name, "attempt": attempt + 1, "error": str(e)},
            )
            continue
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        details = r.json() if r.headers.get("content-type", "").startswith("application/json") else {}
        return ProbeResult(
            probe=probe,
            status_code=r.status_code,
            elapsed_ms=round(elapsed_ms, 2),
            content_type=r.headers.get("content-type", ""),
            details=details,
        )
    return ProbeResult(probe=probe, status_code=None, elapsed_ms=0.0, error=str(last_err))


async def run_probes(
    base_url: str, probes: list[Probe], *, transport: httpx.AsyncBaseTransport | None = None
) -> list[ProbeResult]:
    """Run all probes concurrently against one server."""
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0, transport=transport) as client:
        return list(await asyncio.gather(*(run_probe(client, p) for p in probes)))
