"""Open file handles."""

from __future__ import annotations

from .base import DriveFile
from .directory import DirectoryFile
from .readonly import ReadOnlyFile
from .writable import WritableFile

__all__ = ["DriveFile", "ReadOnlyFile", "DirectoryFile", "WritableFile"]
