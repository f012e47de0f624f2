"""DriveFileSystem: a path-addressed filesystem over Google Drive."""

from __future__ import annotations

import logging
import os
from typing import Optional

from gdrivedav.cache import ResolutionCache
from gdrivedav.call_context import CallContext
from gdrivedav.controller import DriveClient
from gdrivedav.errors import AlreadyExistsError, NotFoundError, UnsupportedOperationError
from gdrivedav.files import DirectoryFile, DriveFile, ReadOnlyFile, WritableFile
from gdrivedav.models import FileMetadata
from gdrivedav.resolver import PathResolver
from gdrivedav.util.paths import ROOT_KEY, display_path, normalize_path, split_path

logger = logging.getLogger(__name__)

_WRITE_FLAGS = os.O_WRONLY | os.O_RDWR | os.O_CREAT | os.O_TRUNC

_MODE_FLAGS: dict[str, int] = {
    "r": os.O_RDONLY,
    "rb": os.O_RDONLY,
    "w": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    "wb": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
}


class DriveFileSystem:
    """
    Hierarchical filesystem contract (stat/open/mkdir/remove/rename) on Drive.

    Every call is stateless from the caller's view but made of several Drive
    requests; each mutation invalidates the cached resolutions of the paths
    it touched (and their parents) before returning.
    """

    def __init__(
        self,
        client: DriveClient,
        cache: Optional[ResolutionCache] = None,
        *,
        root_id: str = "root",
    ) -> None:
        self._client = client
        self._cache = cache if cache is not None else ResolutionCache()
        self._resolver = PathResolver(client, self._cache, root_id=root_id)

    @property
    def client(self) -> DriveClient:
        return self._client

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    # ----------------------------
    # Filesystem contract
    # ----------------------------
    def mkdir(self, path: str, ctx: Optional[CallContext] = None) -> None:
        """
        Create a folder.

        Raises:
            AlreadyExistsError: ``path`` already resolves.
            NotFoundError: the parent is missing or not a folder.
        """
        logger.debug("Mkdir %s", path)
        name = normalize_path(path)
        if name == ROOT_KEY or self._resolver.exists(name, ctx):
            logger.error("dir already exists: %s", display_path(name))
            raise AlreadyExistsError("Directory already exists", details={"path": display_path(name)})

        parent, base = split_path(name)
        try:
            parent_entry = self._resolver.resolve(parent, True, ctx)
        except NotFoundError:
            logger.error("parent not found: %s", display_path(parent))
            raise

        self._client.create_folder(base, parent_entry.file_id, ctx=ctx)
        self._resolver.invalidate(name)

    def stat(self, path: str, ctx: Optional[CallContext] = None) -> FileMetadata:
        logger.debug("Stat %s", path)
        entry = self._resolver.resolve(path, False, ctx)
        return FileMetadata.from_remote(entry.obj)

    def remove_all(self, path: str, ctx: Optional[CallContext] = None) -> None:
        """
        Delete the object at ``path`` (a folder goes with its contents).

        Emptiness is not checked here; Drive decides what deleting a folder
        means.
        """
        logger.debug("RemoveAll %s", path)
        name = normalize_path(path)
        if name == ROOT_KEY:
            raise self._unsupported("removing the root", path=name)

        file_id = self._resolver.resolve_id(name, False, ctx)
        self._client.delete(file_id, ctx=ctx)
        self._resolver.invalidate_tree(name)

    remove = remove_all

    def rename(self, old_path: str, new_path: str, ctx: Optional[CallContext] = None) -> None:
        """
        Rename within one directory.

        Raises:
            UnsupportedOperationError: the parent directories differ.
            AlreadyExistsError: ``new_path`` already resolves.
            NotFoundError: ``old_path`` does not resolve.
        """
        logger.debug("Rename %s -> %s", old_path, new_path)
        old_name = normalize_path(old_path)
        new_name = normalize_path(new_path)

        if old_name == ROOT_KEY or new_name == ROOT_KEY:
            raise self._unsupported("renaming the root", path=old_name, new_path=new_name)

        old_parent, _ = split_path(old_name)
        new_parent, new_base = split_path(new_name)
        if old_parent != new_parent:
            raise self._unsupported("moving between directories", path=old_name, new_path=new_name)

        if self._resolver.exists(new_name, ctx):
            logger.error("file already exists: %s", new_name)
            raise AlreadyExistsError("File already exists", details={"path": new_name})

        entry = self._resolver.resolve(old_name, False, ctx)
        logger.debug("Files.update %s name=%s", entry.path, new_base)
        self._client.update(entry.file_id, name=new_base, ctx=ctx)
        self._resolver.invalidate_tree(old_name)
        self._resolver.invalidate_tree(new_name)

    def open_file(
        self,
        path: str,
        flags: int = os.O_RDONLY,
        ctx: Optional[CallContext] = None,
    ) -> DriveFile:
        """
        Open ``path`` with ``os.O_*`` flags.

        ``O_RDONLY`` gives a ReadOnlyFile (DirectoryFile for folders); any of
        O_WRONLY/O_RDWR/O_CREAT/O_TRUNC gives a WritableFile that creates the
        file on close. Appending is not supported.
        """
        logger.debug("OpenFile %s %#o", path, flags)
        name = normalize_path(path)

        if flags == os.O_RDONLY:
            entry = self._resolver.resolve(name, False, ctx)
            if entry.obj.is_folder:
                return DirectoryFile(self, name, entry.obj, ctx)
            return ReadOnlyFile(self, name, entry.obj, ctx)

        if flags & _WRITE_FLAGS and not flags & os.O_APPEND:
            if name == ROOT_KEY:
                raise self._unsupported("writing to the root", path=name)
            return WritableFile(self, name, ctx)

        raise self._unsupported(f"open mode {flags:#o}", path=name)

    def open(self, path: str, mode: str = "rb", ctx: Optional[CallContext] = None) -> DriveFile:
        """``open_file`` with a Python mode string (``r``, ``rb``, ``w``, ``wb``)."""
        flags = _MODE_FLAGS.get(mode)
        if flags is None:
            raise self._unsupported(f"open mode {mode!r}", path=normalize_path(path))
        return self.open_file(path, flags, ctx)

    def read_dir(self, path: str, ctx: Optional[CallContext] = None) -> list[FileMetadata]:
        """List a folder's entries."""
        with self.open_file(path, os.O_RDONLY, ctx) as handle:
            return handle.readdir()

    # ----------------------------
    # Internals
    # ----------------------------
    def _unsupported(self, what: str, **details: str) -> UnsupportedOperationError:
        shown = {k: display_path(v) for k, v in details.items()}
        logger.error("unsupported operation: %s %s", what, shown)
        return UnsupportedOperationError(f"Unsupported operation: {what}", details=shown)
