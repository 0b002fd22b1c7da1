"""Jellyfish: a read-only static file server with SPA fallback."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jellyfish-server")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
