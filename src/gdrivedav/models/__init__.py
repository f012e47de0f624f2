"""Public model exports for gdrivedav."""

from __future__ import annotations

from .file_metadata import FileMetadata
from .lookup import LookupResult, ResolvedEntry
from .remote_object import RemoteObject

__all__ = [
    "RemoteObject",
    "ResolvedEntry",
    "LookupResult",
    "FileMetadata",
]
