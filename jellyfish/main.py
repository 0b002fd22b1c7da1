"""FastAPI app factory and process entry point for the static server."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request, Response

from jellyfish import __version__
from jellyfish.api import router as api_router
from jellyfish.config import ServerContext, load_config, setup_public_dir
from jellyfish.domain.fallback import INDEX_FILE, bundled_page
from jellyfish.logging_conf import get_logger, resolve_level, setup_logging

# Configure logging before anything else.
setup_logging()
logger = get_logger("jellyfish")


def create_app(context: ServerContext) -> FastAPI:
    """Build the app serving `context.root_directory`.

    Under uvicorn directly, use the factory form:
    `uvicorn --factory jellyfish.main:app_from_env`.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "startup",
            extra={
                "event": "startup",
                "root_directory": str(context.root_directory),
                "spa_mode": context.spa_mode,
            },
        )
        yield
        logger.info("shutdown", extra={"event": "shutdown"})

    app = FastAPI(
        title="Jellyfish static server",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """JSON request logging with a correlation id.

        - Reuses the client's X-Request-ID or mints one
        - Logs start/end with method, path, status and elapsed_ms
        - Echoes X-Request-ID on the response
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.debug(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    app.include_router(api_router)
    return app


def app_from_env() -> FastAPI:
    """ASGI factory reading BIND_*/PUBLIC_DIR/SPA_MODE from the environment."""
    config = load_config()
    setup_public_dir(config.public_dir, bundled_page(INDEX_FILE))
    return create_app(config.context())


def main() -> None:
    config = load_config()
    # LOG_LEVEL may have come from .env, after import-time setup.
    level = resolve_level(config.log_level)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)

    logger.info(
        "jellyfish.starting",
        extra={
            "event": "banner",
            "version": __version__,
            "public_dir": str(config.public_dir),
            "listen": f"http://{config.address}",
            "spa_mode": config.spa_mode,
        },
    )
    setup_public_dir(config.public_dir, bundled_page(INDEX_FILE))

    # uvicorn owns SIGINT/SIGTERM and drains in-flight requests on shutdown.
    uvicorn.run(
        create_app(config.context()),
        host=config.host,
        port=config.port,
        log_config=None,
        log_level=level,
    )


if __name__ == "__main__":
    main()
