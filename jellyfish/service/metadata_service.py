"""Introspection use-cases behind `?info` and `?list`."""
from __future__ import annotations

from fastapi.concurrency import run_in_threadpool

from ..config import ServerContext
from ..domain.outcomes import JsonPayload
from ..domain.paths import SanitizedPath
from ..domain.resources import (
    NOT_FOUND_ERRORS,
    DirectoryResource,
    FileResource,
    classify,
    hash_file,
    list_entries,
)
from ..logging_conf import get_logger

__all__ = ["file_info", "list_directory", "success", "failure"]

logger = get_logger("service.metadata")

INFO_ON_DIRECTORY = "The 'info' parameter is only usable on files"
LIST_ON_FILE = "The 'list' parameter is only usable on directories"
FILE_NOT_FOUND = "File not found"
DIRECTORY_NOT_FOUND = "Directory not found"


def success(data: object) -> JsonPayload:
    return JsonPayload(200, {"success": True, "data": data})


def failure(status: int, message: str) -> JsonPayload:
    return JsonPayload(status, {"success": False, "error": message})


def _io_failure(op: str, path: SanitizedPath, exc: OSError) -> JsonPayload:
    logger.error(
        f"{op}.io_error",
        extra={"event": f"{op}_io_error", "path": path.request_path, "error": str(exc)},
    )
    return failure(500, str(exc))


def _file_info_sync(context: ServerContext, path: SanitizedPath) -> JsonPayload:
    try:
        resource = classify(context.root_directory, path)
        if isinstance(resource, DirectoryResource):
            return failure(400, INFO_ON_DIRECTORY)
        if not isinstance(resource, FileResource):
            return failure(404, FILE_NOT_FOUND)
        hashed = hash_file(resource)
    except NOT_FOUND_ERRORS:
        # Deleted between the stat and the read.
        return failure(404, FILE_NOT_FOUND)
    except OSError as e:
        return _io_failure("file_info", path, e)

    return success(
        {
            "path": path.request_path,
            "size_bytes": hashed.size,
            "modified_time": hashed.modified_time,
            "hash_xxh64": hashed.byte_hash,
        }
    )


def _list_directory_sync(context: ServerContext, path: SanitizedPath) -> JsonPayload:
    try:
        resource = classify(context.root_directory, path)
        if isinstance(resource, FileResource):
            return failure(400, LIST_ON_FILE)
        if not isinstance(resource, DirectoryResource):
            return failure(404, DIRECTORY_NOT_FOUND)
        listed = list_entries(resource)
    except NOT_FOUND_ERRORS:
        return failure(404, DIRECTORY_NOT_FOUND)
    except OSError as e:
        return _io_failure("list_directory", path, e)

    return success(
        [
            {"name": e.name, "is_dir": e.is_dir, "modified_time": e.modified_time}
            for e in listed.entries or ()
        ]
    )


async def file_info(context: ServerContext, path: SanitizedPath) -> JsonPayload:
    """Size, mtime and xxh64 of a regular file; 400 on a directory, 404 if absent."""
    return await run_in_threadpool(_file_info_sync, context, path)


async def list_directory(context: ServerContext, path: SanitizedPath) -> JsonPayload:
    """Direct children of a directory; 400 on a file, 404 if absent."""
    return await run_in_threadpool(_list_directory_sync, context, path)
