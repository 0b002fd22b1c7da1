from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "StaticContent",
    "JsonPayload",
    "SpaIndex",
    "NotFoundCustom",
    "NotFoundBuiltin",
    "Forbidden",
    "InternalError",
    "ResponseOutcome",
]


@dataclass(frozen=True)
class StaticContent:
    body: bytes
    content_type: str
    status: int = 200


@dataclass(frozen=True)
class JsonPayload:
    status: int
    body: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SpaIndex:
    body: bytes
    status: int = 200


@dataclass(frozen=True)
class NotFoundCustom:
    body: bytes
    status: int = 404


@dataclass(frozen=True)
class NotFoundBuiltin:
    body: bytes
    status: int = 404


@dataclass(frozen=True)
class Forbidden:
    message: str = "Forbidden"
    status: int = 403


@dataclass(frozen=True)
class InternalError:
    message: str
    status: int = 500


ResponseOutcome = (
    StaticContent | JsonPayload | SpaIndex | NotFoundCustom | NotFoundBuiltin | Forbidden | InternalError
)
