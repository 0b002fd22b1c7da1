from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from jellyfish.config import ServerContext
from jellyfish.main import create_app

INDEX_BODY = b"<!doctype html><title>app</title><div id=\"root\">spa shell</div>"
CUSTOM_404_BODY = b"<!doctype html><p>custom missing page</p>"
REPORT_BYTES = bytes(range(256)) * 4  # 1024 bytes


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    """A small site: index.html, assets, a 1024-byte PDF and nested dirs."""
    root = tmp_path / "public"
    (root / "assets").mkdir(parents=True)
    (root / "docs" / "guide").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "index.html").write_bytes(INDEX_BODY)
    (root / "assets" / "app.js").write_text("console.log('hi');\n")
    (root / "assets" / "style.css").write_text("body{}\n")
    (root / "assets" / "blob.unknownext").write_bytes(b"\x00\x01")
    (root / "docs" / "report.pdf").write_bytes(REPORT_BYTES)
    (root / "docs" / "guide" / "index.html").write_text("<p>guide</p>")
    return root


@pytest.fixture
def make_client():
    """Factory: make_client(root, spa_mode=False) -> TestClient."""

    def _make(root: Path, spa_mode: bool = False) -> TestClient:
        app = create_app(ServerContext(root_directory=root, spa_mode=spa_mode))
        return TestClient(app)

    return _make


@pytest.fixture
def client(public_dir: Path, make_client) -> TestClient:
    return make_client(public_dir)


@pytest.fixture
def spa_client(public_dir: Path, make_client) -> TestClient:
    return make_client(public_dir, spa_mode=True)
