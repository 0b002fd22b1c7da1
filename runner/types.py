from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Probe:
    """One request the smoke run sends and the status it expects back."""

    name: str
    path: str
    expected_status: int
    expect_json: bool = False


@dataclass
class ProbeResult:
    probe: Probe
    status_code: int | None
    elapsed_ms: float
    content_type: str = ""
    error: str | None = None
    details: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        if self.error is not None or self.status_code != self.probe.expected_status:
            return False
        if self.probe.expect_json:
            return self.content_type.startswith("application/json")
        return True


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., server never ready)."""


class ServerUnavailableError(SmokeError):
    """Raised when the server does not answer within the startup timeout."""
