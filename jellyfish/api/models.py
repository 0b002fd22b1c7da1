from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel


class FileInfo(BaseModel):
    """Metadata for a single regular file (`?info`)."""
    path: str
    size_bytes: int
    modified_time: datetime
    hash_xxh64: str


class DirectoryEntry(BaseModel):
    """One direct child of a listed directory (`?list`)."""
    name: str
    is_dir: bool
    modified_time: datetime


class MetadataEnvelope(BaseModel):
    """Wrapper for every introspection response.

    Success carries `data`, failure carries `error`.
    """
    success: bool
    data: Union[FileInfo, list[DirectoryEntry], None] = None
    error: Optional[str] = None

    def render(self) -> dict:
        out = self.model_dump(mode="json")
        if self.success:
            out.pop("error")
        else:
            out.pop("data")
        return out
