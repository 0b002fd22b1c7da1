"""Request resolution: sanitize, introspect, serve, then fall back."""
from __future__ import annotations

import errno

from fastapi.concurrency import run_in_threadpool

from ..config import ServerContext
from ..domain.content import guess_content_type
from ..domain.fallback import INDEX_FILE, decide_fallback
from ..domain.outcomes import (
    Forbidden,
    InternalError,
    NotFoundBuiltin,
    NotFoundCustom,
    ResponseOutcome,
    SpaIndex,
    StaticContent,
)
from ..domain.paths import ForbiddenPathError, SanitizedPath, sanitize
from ..domain.resources import (
    DirectoryResource,
    FileResource,
    classify,
    read_file_bytes,
)
from ..logging_conf import get_logger
from . import metadata_service

__all__ = ["StaticServeError", "serve_static", "fallback", "resolve_request"]

logger = get_logger("service.static")

# Errors that turn a static hit into a miss; the fallback engine still answers.
_MISS_ERRORS = (FileNotFoundError, NotADirectoryError, IsADirectoryError, PermissionError)
_MISS_ERRNOS = {errno.ENAMETOOLONG, errno.ELOOP}


class StaticServeError(RuntimeError):
    """Unexpected I/O failure while serving a static file."""


def _is_miss(exc: OSError) -> bool:
    return isinstance(exc, _MISS_ERRORS) or exc.errno in _MISS_ERRNOS


def _serve_sync(context: ServerContext, path: SanitizedPath) -> StaticContent | None:
    try:
        resource = classify(context.root_directory, path)
        if isinstance(resource, FileResource):
            target = resource.path
        elif isinstance(resource, DirectoryResource):
            target = resource.path / INDEX_FILE
        else:
            return None
        data = read_file_bytes(target)
    except OSError as e:
        if _is_miss(e):
            return None
        raise StaticServeError(str(e)) from e
    return StaticContent(data, guess_content_type(target.name))


async def serve_static(context: ServerContext, path: SanitizedPath) -> StaticContent | None:
    """Return the file (or a directory's index.html) at `path`, None on a miss.

    Raises:
        StaticServeError: for I/O failures that are not a plain miss.
    """
    return await run_in_threadpool(_serve_sync, context, path)


async def fallback(context: ServerContext, path: SanitizedPath) -> ResponseOutcome:
    outcome = await run_in_threadpool(decide_fallback, context.root_directory, context.spa_mode)
    extra = {"path": path.request_path, "spa_mode": context.spa_mode}
    if isinstance(outcome, SpaIndex):
        logger.debug("fallback.spa_index", extra={"event": "fallback_spa_index", **extra})
    elif isinstance(outcome, NotFoundCustom):
        logger.info("fallback.not_found_custom", extra={"event": "fallback_not_found_custom", **extra})
    elif isinstance(outcome, NotFoundBuiltin):
        logger.info("fallback.not_found_builtin", extra={"event": "fallback_not_found_builtin", **extra})
    else:
        logger.error("fallback.spa_index_missing", extra={"event": "fallback_spa_index_missing", **extra})
    return outcome


async def resolve_request(
    context: ServerContext,
    raw_path: str | bytes,
    *,
    info: bool = False,
    listing: bool = False,
) -> ResponseOutcome:
    """Map a raw request path (and its query flags) to exactly one outcome.

    Order: sanitize -> ?info / ?list (SPA mode off only, info wins) ->
    static file -> fallback engine.
    """
    try:
        path = sanitize(raw_path)
    except ForbiddenPathError as e:
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode("latin-1")
        logger.warning(
            "path.forbidden",
            extra={"event": "path_forbidden", "raw_path": raw_path, "reason": str(e)},
        )
        return Forbidden()

    if not context.spa_mode:
        if info:
            return await metadata_service.file_info(context, path)
        if listing:
            return await metadata_service.list_directory(context, path)

    try:
        static = await serve_static(context, path)
    except StaticServeError as e:
        logger.exception(
            "static.error",
            extra={"event": "static_error", "path": path.request_path},
        )
        return InternalError(f"Static file service error: {e}")
    if static is not None:
        return static

    return await fallback(context, path)
