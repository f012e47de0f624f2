"""Data model for Drive objects as seen by the filesystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from gdrivedav.util.mime import is_folder


@dataclass(slots=True, frozen=True)
class RemoteObject:
    """
    A Drive file or folder.

    Notes:
        - ``file_id`` is authoritative; ``name`` is not unique within a parent.
        - ``app_properties`` holds application-defined key/value pairs
          (used for WebDAV dead properties).
    """

    file_id: str
    name: str
    mime_type: str
    parents: tuple[str, ...] = ()

    trashed: bool = False
    size: Optional[int] = None
    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    md5_checksum: Optional[str] = None
    app_properties: dict[str, str] = field(default_factory=dict)

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)
