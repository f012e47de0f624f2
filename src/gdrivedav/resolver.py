"""Path -> Drive object resolution."""

from __future__ import annotations

import logging
from typing import Optional

from gdrivedav.cache import ResolutionCache
from gdrivedav.call_context import CallContext
from gdrivedav.controller import DriveClient
from gdrivedav.errors import NotFoundError
from gdrivedav.models import LookupResult, ResolvedEntry
from gdrivedav.util.paths import ROOT_KEY, display_path, normalize_path, split_path

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Resolve slash-separated paths by walking parent folders on Drive.

    Each uncached segment costs one ``list_children`` call; results (found
    objects and NotFound outcomes) are cached per path. Other remote failures
    propagate and are never cached.
    """

    def __init__(
        self,
        client: DriveClient,
        cache: ResolutionCache,
        *,
        root_id: str = "root",
    ) -> None:
        self._client = client
        self._cache = cache
        self._root_id = root_id

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def root_id(self) -> str:
        return self._root_id

    def resolve(
        self,
        path: str,
        only_directories: bool = False,
        ctx: Optional[CallContext] = None,
    ) -> ResolvedEntry:
        """
        Return the object at ``path``.

        Raises:
            NotFoundError: the path (or one of its parents) does not exist, or
                ``only_directories`` is set and the object is not a folder.
            RemoteError: any other Drive failure.
        """
        key = normalize_path(path)

        hit = self._from_cache(key, only_directories)
        if hit is not None:
            return hit.unwrap()

        try:
            entry = self._resolve_uncached(key, only_directories, ctx)
        except NotFoundError as exc:
            self._cache.set(
                key,
                LookupResult.from_error(exc, only_directories=only_directories),
            )
            raise

        self._cache.set(key, LookupResult(entry=entry, only_directories=only_directories))
        return entry

    def resolve_id(
        self,
        path: str,
        only_directories: bool = False,
        ctx: Optional[CallContext] = None,
    ) -> str:
        return self.resolve(path, only_directories, ctx).file_id

    def exists(self, path: str, ctx: Optional[CallContext] = None) -> bool:
        """True if ``path`` resolves; NotFound is False, other errors propagate."""
        try:
            self.resolve(path, False, ctx)
        except NotFoundError:
            return False
        return True

    def invalidate(self, path: str) -> None:
        """Forget ``path`` and its parent."""
        key = normalize_path(path)
        self._cache.delete(key)
        if key != ROOT_KEY:
            self._cache.delete(split_path(key)[0])

    def invalidate_tree(self, path: str) -> None:
        """Forget ``path``, everything cached below it, and its parent."""
        key = normalize_path(path)
        self._cache.delete_tree(key)
        if key != ROOT_KEY:
            self._cache.delete(split_path(key)[0])

    # ----------------------------
    # Internals
    # ----------------------------
    def _from_cache(self, key: str, only_directories: bool) -> Optional[LookupResult]:
        """Cached outcome that answers this lookup, or None for a miss."""
        cached, found = self._cache.get(key, only_directories)
        if found and cached is not None:
            logger.debug("cache hit %r (folders only: %s)", display_path(key), only_directories)
            return cached
        if not only_directories:
            # A folder-only result says nothing about files of the same name.
            return None

        # Listings are oldest first, so a general result that is a folder (or
        # nothing at all) is also what a folder-only listing would return.
        cached, found = self._cache.get(key, False)
        if not found or cached is None:
            return None
        if cached.found and not cached.unwrap().obj.is_folder:
            return None
        logger.debug("cache hit %r (general result reused)", display_path(key))
        return cached

    def _resolve_uncached(
        self,
        key: str,
        only_directories: bool,
        ctx: Optional[CallContext],
    ) -> ResolvedEntry:
        if key == ROOT_KEY:
            obj = self._client.get(self._root_id, ctx=ctx)
            return ResolvedEntry(obj=obj, path="/")

        parent, base = split_path(key)
        try:
            parent_entry = self.resolve(parent, True, ctx)
        except NotFoundError as exc:
            logger.debug("can't locate parent %r of %r", display_path(parent), key)
            raise NotFoundError(
                "No such file or directory",
                details={"path": key, "missing_parent": display_path(parent)},
            ) from exc

        candidates = self._client.list_children(
            parent_entry.file_id,
            name=base,
            folder_only=only_directories,
            ctx=ctx,
        )
        for obj in candidates:
            if obj.trashed:
                continue
            if only_directories and not obj.is_folder:
                continue
            return ResolvedEntry(obj=obj, path=key)

        logger.debug("not found %r", key)
        raise NotFoundError(
            "No such file or directory",
            details={"path": key, "parent_id": parent_entry.file_id},
        )
