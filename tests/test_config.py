from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from jellyfish.config import (
    DEFAULT_PORT,
    ServerContext,
    get_port_from_env,
    get_public_dir_from_env,
    get_spa_mode_from_env,
    load_config,
    setup_public_dir,
)
from jellyfish.domain.fallback import bundled_page
from jellyfish.logging_conf import JsonFormatter, resolve_level


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # setenv first so teardown also removes values a .env file loaded.
    for name in ("BIND_HOST", "BIND_PORT", "PUBLIC_DIR", "SPA_MODE", "LOG_LEVEL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    config = load_config()
    assert config.port == DEFAULT_PORT
    assert config.host == "0.0.0.0"
    assert config.spa_mode is False
    assert config.public_dir == tmp_path / "jellyfish" / "public"
    assert config.context() == ServerContext(config.public_dir, spa_mode=False)


def test_dotenv_file_is_loaded(tmp_path: Path) -> None:
    site = tmp_path / "site"
    (tmp_path / ".env").write_text(f"BIND_PORT=4040\nSPA_MODE=true\nPUBLIC_DIR={site}\n")
    config = load_config()
    assert config.port == 4040
    assert config.spa_mode is True
    assert config.public_dir == site


def test_environment_wins_over_dotenv(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "custom.env").write_text("BIND_PORT=4040\n")
    monkeypatch.setenv("BIND_PORT", "5050")
    assert load_config(tmp_path / "custom.env").port == 5050


@pytest.mark.parametrize("raw", ["abc", "-1", "70000"])
def test_bad_port(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("BIND_PORT", raw)
    with pytest.raises(ValueError):
        get_port_from_env()


@pytest.mark.parametrize("raw, expected", [("1", True), ("TRUE", True), ("on", True), ("0", False), ("no", False)])
def test_spa_mode_parsing(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("SPA_MODE", raw)
    assert get_spa_mode_from_env() is expected


def test_spa_mode_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SPA_MODE", "maybe")
    with pytest.raises(ValueError):
        get_spa_mode_from_env()


def test_public_dir_is_absolute(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUBLIC_DIR", "relative/site")
    assert get_public_dir_from_env().is_absolute()


def test_context_is_immutable(tmp_path: Path) -> None:
    ctx = ServerContext(tmp_path, spa_mode=True)
    with pytest.raises(AttributeError):
        ctx.spa_mode = False  # type: ignore[misc]


def test_setup_public_dir_seeds_index(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "public"
    assert setup_public_dir(target, bundled_page("index.html")) is True
    assert (target / "index.html").read_bytes() == bundled_page("index.html")


def test_setup_public_dir_leaves_existing_alone(tmp_path: Path) -> None:
    assert setup_public_dir(tmp_path, b"seed") is False
    assert not (tmp_path / "index.html").exists()


def test_json_formatter_includes_extras() -> None:
    record = logging.LogRecord("service.static", logging.INFO, __file__, 1, "path.forbidden", (), None)
    record.event = "path_forbidden"
    record.path = Path("/srv/www")
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "path.forbidden"
    assert payload["level"] == "INFO"
    assert payload["event"] == "path_forbidden"
    assert payload["path"] == "/srv/www"
    assert "lineno" not in payload


def test_resolve_level() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("nonsense") == logging.INFO
    assert resolve_level(logging.ERROR) == logging.ERROR
