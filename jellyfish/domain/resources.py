"""Filesystem classification and metadata for sanitized paths.

Everything here is synchronous and touches the disk; callers in the service
layer run these functions in a worker thread.
"""
from __future__ import annotations

import errno
import os
import stat
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .content import content_hash
from .paths import SanitizedPath

__all__ = [
    "FileResource",
    "DirectoryResource",
    "DirectoryEntry",
    "MissingResource",
    "ResourceDescriptor",
    "NOT_FOUND_ERRORS",
    "classify",
    "read_file_bytes",
    "hash_file",
    "list_entries",
]

# OSErrors that mean "there is nothing usable at this path".
NOT_FOUND_ERRORS = (FileNotFoundError, NotADirectoryError)
_MISSING_ERRNOS = {errno.ENAMETOOLONG, errno.ELOOP}


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    is_dir: bool
    modified_time: datetime


@dataclass(frozen=True)
class FileResource:
    path: Path
    size: int
    modified_time: datetime
    byte_hash: str | None = None


@dataclass(frozen=True)
class DirectoryResource:
    path: Path
    modified_time: datetime
    entries: tuple[DirectoryEntry, ...] | None = None


@dataclass(frozen=True)
class MissingResource:
    path: Path


ResourceDescriptor = FileResource | DirectoryResource | MissingResource


def _mtime(st: os.stat_result) -> datetime:
    return datetime.fromtimestamp(st.st_mtime, tz=UTC)


def classify(root: Path, path: SanitizedPath) -> ResourceDescriptor:
    """Stat the resolved path (following symlinks) and tag what is there.

    Only existence and kind are checked; file contents are not read. Special
    files (FIFOs, sockets, devices) are reported as missing.

    Raises:
        OSError: for stat failures other than not-found.
    """
    target = path.join(root)
    try:
        st = target.stat()
    except OSError as e:
        if isinstance(e, NOT_FOUND_ERRORS) or e.errno in _MISSING_ERRNOS:
            return MissingResource(target)
        raise

    if stat.S_ISREG(st.st_mode):
        return FileResource(target, size=st.st_size, modified_time=_mtime(st))
    if stat.S_ISDIR(st.st_mode):
        return DirectoryResource(target, modified_time=_mtime(st))
    return MissingResource(target)


def read_file_bytes(target: Path) -> bytes:
    """Read a whole file into memory."""
    return target.read_bytes()


def hash_file(resource: FileResource) -> FileResource:
    """Return a copy of `resource` carrying the hash of its current bytes.

    Size is taken from the bytes actually read so the two always agree.
    """
    data = read_file_bytes(resource.path)
    return FileResource(
        resource.path,
        size=len(data),
        modified_time=resource.modified_time,
        byte_hash=content_hash(data),
    )


def list_entries(resource: DirectoryResource) -> DirectoryResource:
    """Return a copy of `resource` with its direct children filled in.

    Order is whatever the OS enumerates. Children whose metadata cannot be
    read (dangling symlinks, races with deletion, permissions) are skipped.
    """
    entries: list[DirectoryEntry] = []
    with os.scandir(resource.path) as it:
        for entry in it:
            try:
                st = entry.stat()
                is_dir = entry.is_dir()
            except OSError:
                continue
            entries.append(DirectoryEntry(entry.name, is_dir=is_dir, modified_time=_mtime(st)))
    return DirectoryResource(resource.path, modified_time=resource.modified_time, entries=tuple(entries))
