"""Buffered write handle."""

from __future__ import annotations

import logging
from typing import Optional

from gdrivedav.call_context import CallContext
from gdrivedav.errors import AlreadyExistsError, NotFoundError
from gdrivedav.models import FileMetadata
from gdrivedav.util.mime import guess_mime_type
from gdrivedav.util.paths import split_path

from .base import DriveFile

logger = logging.getLogger(__name__)


class WritableFile(DriveFile):
    """
    Write handle that uploads on close.

    Bytes accumulate in memory; ``close`` checks the target is still free,
    creates it under its parent with the whole buffer in one request, and
    invalidates the cached resolutions of the target and its parent.
    Overwriting an existing file is not supported.
    """

    kind = "write-only"

    def __init__(self, fs, path: str, ctx: Optional[CallContext] = None) -> None:
        super().__init__(fs, path, ctx)
        self._buffer = bytearray()
        self._size = 0

    @property
    def size(self) -> int:
        return self._size

    def write(self, data: bytes) -> int:
        self._ensure_open()
        self._buffer += data
        n = len(data)
        self._size += n
        logger.debug("Write %s %d bytes", self.path, n)
        return n

    def stat(self) -> FileMetadata:
        _, base = split_path(self._path)
        return FileMetadata(name=base, is_dir=False, size=self._size)

    def close(self) -> None:
        if self._closed:
            return
        logger.debug("Close %s", self.path)
        content = bytes(self._buffer)
        # The handle is closed from here on, even if the upload fails.
        self._closed = True
        self._buffer = bytearray()
        self._upload(content)

    def _upload(self, content: bytes) -> None:
        fs = self._fs
        # Not atomic with the create below: two writers may both pass.
        if fs.resolver.exists(self._path, self._ctx):
            logger.error("Can't create %s: already exists", self.path)
            raise AlreadyExistsError("File already exists", details={"path": self.path})

        parent, base = split_path(self._path)
        try:
            parent_entry = fs.resolver.resolve(parent, True, self._ctx)
        except NotFoundError:
            logger.error("Can't create %s: parent directory not found", self.path)
            raise

        fs.client.create(
            base,
            parent_entry.file_id,
            mime_type=guess_mime_type(base),
            content=content,
            ctx=self._ctx,
        )
        fs.resolver.invalidate(self._path)
        logger.debug("Uploaded %s (%d bytes)", self.path, len(content))
