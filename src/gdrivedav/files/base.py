"""Common surface of open file handles."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Mapping, Optional

from gdrivedav.call_context import CallContext
from gdrivedav.errors import InvalidStateError, UnsupportedOperationError
from gdrivedav.models import FileMetadata, RemoteObject
from gdrivedav.util.paths import display_path
from gdrivedav.util.properties import (
    PropertyName,
    app_properties_patch,
    properties_from_app_properties,
)

if TYPE_CHECKING:
    from gdrivedav.filesystem import DriveFileSystem

logger = logging.getLogger(__name__)


class DriveFile:
    """
    An open handle returned by ``DriveFileSystem.open_file``.

    Every handle offers the same methods; the ones that make no sense for a
    given kind raise UnsupportedOperationError instead of guessing.
    Handles are context managers.
    """

    kind: str = "file"

    def __init__(
        self,
        fs: DriveFileSystem,
        path: str,
        ctx: Optional[CallContext] = None,
    ) -> None:
        self._fs = fs
        self._path = path
        self._ctx = ctx
        self._closed = False

    @property
    def path(self) -> str:
        return display_path(self._path)

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        raise self._unsupported("read")

    def readinto(self, buffer) -> int:
        raise self._unsupported("readinto")

    def write(self, data: bytes) -> int:
        raise self._unsupported("write")

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        raise self._unsupported("seek")

    def tell(self) -> int:
        raise self._unsupported("tell")

    def readdir(self) -> list[FileMetadata]:
        raise self._unsupported("readdir")

    def stat(self) -> FileMetadata:
        raise self._unsupported("stat")

    def close(self) -> None:
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{type(self).__name__} {self.path!r} {state}>"

    # ----------------------------
    # Dead properties
    # ----------------------------
    def dead_props(self) -> dict[PropertyName, str]:
        """Custom (namespace, name) -> value properties stored on the object."""
        obj = self._current_object()
        return properties_from_app_properties(obj.app_properties)

    def patch_props(
        self,
        patches: Mapping[PropertyName, Optional[str]],
    ) -> dict[PropertyName, str]:
        """Set (or, with ``None``, remove) properties; returns the stored set."""
        if not patches:
            return self.dead_props()
        obj = self._current_object()
        logger.debug("Patch props %s %s", self.path, list(patches))
        updated = self._fs.client.update(
            obj.file_id,
            app_properties=app_properties_patch(patches),
            ctx=self._ctx,
        )
        self._fs.resolver.invalidate(self._path)
        self._on_patched(updated)
        return properties_from_app_properties(updated.app_properties)

    def _current_object(self) -> RemoteObject:
        return self._fs.resolver.resolve(self._path, False, self._ctx).obj

    def _on_patched(self, obj: RemoteObject) -> None:
        pass

    # ----------------------------
    # Internals
    # ----------------------------
    def _unsupported(self, op: str) -> UnsupportedOperationError:
        logger.error("%s is not supported on %s handle %s", op, self.kind, self.path)
        return UnsupportedOperationError(
            f"{op} is not supported on a {self.kind} handle",
            details={"path": self.path, "op": op},
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise InvalidStateError("I/O operation on closed handle", details={"path": self.path})


class ResolvedFile(DriveFile):
    """A handle bound to an already resolved Drive object."""

    def __init__(
        self,
        fs: DriveFileSystem,
        path: str,
        obj: RemoteObject,
        ctx: Optional[CallContext] = None,
    ) -> None:
        super().__init__(fs, path, ctx)
        self._obj = obj

    @property
    def remote_object(self) -> RemoteObject:
        return self._obj

    def stat(self) -> FileMetadata:
        return FileMetadata.from_remote(self._obj)

    def dead_props(self) -> dict[PropertyName, str]:
        return properties_from_app_properties(self._obj.app_properties)

    def _current_object(self) -> RemoteObject:
        return self._obj

    def _on_patched(self, obj: RemoteObject) -> None:
        self._obj = obj
