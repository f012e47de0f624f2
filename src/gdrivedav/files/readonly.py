"""Buffered read handle."""

from __future__ import annotations

import logging
import os
from typing import Optional

from gdrivedav.call_context import CallContext
from gdrivedav.errors import UnsupportedOperationError
from gdrivedav.models import RemoteObject
from gdrivedav.util.mime import is_download_disallowed

from .base import ResolvedFile

logger = logging.getLogger(__name__)


class ReadOnlyFile(ResolvedFile):
    """
    Read handle over a Drive file.

    Drive offers no partial reads here: the first ``read`` (or a seek to the
    end) downloads the whole object into memory, and later reads are served
    from that buffer. A failed download is not remembered; the next read
    tries again.
    """

    kind = "read-only"

    def __init__(self, fs, path: str, obj: RemoteObject, ctx: Optional[CallContext] = None) -> None:
        super().__init__(fs, path, obj, ctx)
        self._content: Optional[bytes] = None
        self._pos = 0

    def read(self, size: int = -1) -> bytes:
        self._ensure_open()
        content = self._load_content()
        if size is None or size < 0:
            end = len(content)
        else:
            end = min(len(content), self._pos + size)
        chunk = content[self._pos:end]
        self._pos = end
        logger.debug("Read %s %d bytes", self.path, len(chunk))
        return chunk

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        chunk = self.read(len(view))
        n = len(chunk)
        view[:n] = chunk
        return n

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._ensure_open()
        logger.debug("Seek %s %d %d", self.path, offset, whence)
        if offset == 0 and whence == os.SEEK_SET:
            self._pos = 0
            return 0
        if offset == 0 and whence == os.SEEK_END:
            self._pos = len(self._load_content())
            return self._pos
        if offset == 0 and whence == os.SEEK_CUR:
            return self._pos
        raise UnsupportedOperationError(
            "only rewinding and seeking to the end are supported",
            details={"path": self.path, "offset": offset, "whence": whence},
        )

    def tell(self) -> int:
        self._ensure_open()
        return self._pos

    def close(self) -> None:
        self._content = None
        self._pos = 0
        super().close()

    @property
    def loaded(self) -> bool:
        return self._content is not None

    def _load_content(self) -> bytes:
        if self._content is not None:
            return self._content

        if is_download_disallowed(self._obj.mime_type):
            logger.error("Can't download %s: %s has no binary content", self.path, self._obj.mime_type)
            raise UnsupportedOperationError(
                "Folders and Google-apps documents have no downloadable content",
                details={"path": self.path, "mime_type": self._obj.mime_type},
            )

        self._content = self._fs.client.download(self._obj.file_id, ctx=self._ctx)
        logger.debug("Loaded %s (%d bytes)", self.path, len(self._content))
        return self._content
