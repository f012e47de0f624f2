"""Process-wide owner of the Drive filesystem."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from gdrivedav.auth import OAuthClient
from gdrivedav.cache import ResolutionCache
from gdrivedav.config import DavConfig
from gdrivedav.controller import DriveClient
from gdrivedav.errors import InvalidStateError
from gdrivedav.filesystem import DriveFileSystem

logger = logging.getLogger(__name__)

ClientFactory = Callable[[DavConfig], DriveClient]


def default_client_factory(config: DavConfig) -> DriveClient:
    """Authenticate with the configured OAuth files and build a DriveClient."""
    oauth = OAuthClient.from_config(config)
    service_factory = oauth.service_factory(
        config.scopes,
        timeout_sec=config.request_timeout_sec,
    )
    return DriveClient(
        service_factory,
        supports_all_drives=config.supports_all_drives,
        max_retries=config.max_retries,
    )


class DriveContext:
    """
    Owns the one DriveFileSystem of a process.

    The filesystem (and the authenticated client under it) is built on first
    use; concurrent first uses build it exactly once. Pass the context to the
    code serving requests instead of keeping module-level globals.
    """

    def __init__(
        self,
        config: DavConfig,
        *,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or default_client_factory
        self._lock = threading.Lock()
        self._fs: Optional[DriveFileSystem] = None
        self._closed = False

    @property
    def config(self) -> DavConfig:
        return self._config

    @property
    def initialized(self) -> bool:
        return self._fs is not None

    @property
    def filesystem(self) -> DriveFileSystem:
        fs = self._fs
        if fs is not None:
            return fs
        with self._lock:
            if self._closed:
                raise InvalidStateError("DriveContext is closed")
            if self._fs is None:
                self._fs = self._build()
            return self._fs

    def close(self) -> None:
        """Stop background work. The context can't be used afterwards."""
        with self._lock:
            self._closed = True
            fs, self._fs = self._fs, None
        if fs is not None:
            fs.cache.close()

    def __enter__(self) -> DriveContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _build(self) -> DriveFileSystem:
        config = self._config
        logger.info("Initializing Drive filesystem (root=%s)", config.root_id)
        client = self._client_factory(config)
        cache = ResolutionCache(config.cache_ttl_sec)
        if config.cache_sweep_interval_sec > 0:
            cache.start_sweeper(config.cache_sweep_interval_sec)
        return DriveFileSystem(client, cache, root_id=config.root_id)
