"""Directory handle."""

from __future__ import annotations

import logging

from gdrivedav.models import FileMetadata

from .base import ResolvedFile

logger = logging.getLogger(__name__)


class DirectoryFile(ResolvedFile):
    """Handle over a Drive folder; only ``readdir``/``stat``/props apply."""

    kind = "directory"

    def readdir(self) -> list[FileMetadata]:
        self._ensure_open()
        logger.debug("Readdir %s", self.path)
        children = self._fs.client.list_children(self._obj.file_id, ctx=self._ctx)
        return [FileMetadata.from_remote(c) for c in children if not c.trashed]
