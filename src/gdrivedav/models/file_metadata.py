"""Filesystem-facing projection of a Drive object."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .remote_object import RemoteObject


@dataclass(slots=True, frozen=True)
class FileMetadata:
    """What ``stat``/``readdir`` report for an entry."""

    name: str
    is_dir: bool
    size: int
    modified_time: Optional[datetime] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_remote(cls, obj: RemoteObject) -> FileMetadata:
        # Drive omits modifiedTime on some shared items; fall back to creation.
        modified = obj.modified_time or obj.created_time
        return cls(
            name=obj.name,
            is_dir=obj.is_folder,
            size=obj.size or 0,
            modified_time=modified,
            mime_type=obj.mime_type or None,
        )
