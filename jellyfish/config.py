"""Environment-driven configuration and public directory bootstrap."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .logging_conf import get_logger

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_PUBLIC_DIR",
    "ServerContext",
    "ServerConfig",
    "get_host_from_env",
    "get_port_from_env",
    "get_public_dir_from_env",
    "get_spa_mode_from_env",
    "load_config",
    "setup_public_dir",
]

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 33433
DEFAULT_PUBLIC_DIR = "~/jellyfish/public"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"", "0", "false", "no", "off"}

logger = get_logger("config")


@dataclass(frozen=True)
class ServerContext:
    """What every request handler needs; immutable after startup."""

    root_directory: Path
    spa_mode: bool = False


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    public_dir: Path
    spa_mode: bool
    log_level: str

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def context(self) -> ServerContext:
        return ServerContext(root_directory=self.public_dir, spa_mode=self.spa_mode)


def get_host_from_env() -> str:
    return os.getenv("BIND_HOST", DEFAULT_HOST)


def get_port_from_env() -> int:
    """Return BIND_PORT, defaulting to 33433."""
    raw = os.getenv("BIND_PORT", str(DEFAULT_PORT))
    try:
        port = int(raw, 10)
    except ValueError as e:
        raise ValueError("BIND_PORT must be an integer") from e
    if not (0 <= port <= 65535):
        raise ValueError("BIND_PORT must be in [0,65535]")
    return port


def get_public_dir_from_env() -> Path:
    """Return PUBLIC_DIR with `~` expanded, as an absolute path."""
    raw = os.getenv("PUBLIC_DIR", DEFAULT_PUBLIC_DIR)
    return Path(raw).expanduser().absolute()


def get_spa_mode_from_env() -> bool:
    raw = os.getenv("SPA_MODE", "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"SPA_MODE must be a boolean, got {raw!r}")


def load_config(env_file: str | Path = ".env") -> ServerConfig:
    """Read configuration, loading `env_file` (relative to the cwd) first.

    Variables already set in the process environment win over the file.
    """
    load_dotenv(env_file, override=False)
    return ServerConfig(
        host=get_host_from_env(),
        port=get_port_from_env(),
        public_dir=get_public_dir_from_env(),
        spa_mode=get_spa_mode_from_env(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def setup_public_dir(public_dir: Path, index_html: bytes) -> bool:
    """Create a missing public directory seeded with `index_html`.

    An existing directory is never touched. Returns True if it was created.
    """
    if public_dir.exists():
        return False

    logger.info(
        "public_dir.created",
        extra={"event": "public_dir_created", "public_dir": str(public_dir)},
    )
    public_dir.mkdir(parents=True, exist_ok=True)
    (public_dir / "index.html").write_bytes(index_html)
    return True
