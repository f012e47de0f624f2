"""Time-bounded cache of path resolutions."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from gdrivedav.models import LookupResult
from gdrivedav.util.paths import ROOT_KEY, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_TTL_SEC: float = 60.0


@dataclass(slots=True, frozen=True)
class _Entry:
    result: LookupResult
    expires_at: float


class ResolutionCache:
    """
    Thread-safe map of normalized path -> LookupResult with a fixed TTL.

    Keys are normalized paths; the root is ``""``. Each path has two slots:
    one for general lookups and one for folder-only lookups (chosen by
    ``LookupResult.only_directories``), since Drive lets a file and a folder
    share a name. An expired entry read on access is dropped and reported as
    a miss, so the optional background sweeper only reclaims memory.
    """

    def __init__(
        self,
        ttl_sec: float = DEFAULT_TTL_SEC,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        self._ttl_sec = ttl_sec
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[tuple[str, bool], _Entry] = {}
        self._sweeper: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def ttl_sec(self) -> float:
        return self._ttl_sec

    def get(
        self,
        path: str,
        only_directories: bool = False,
    ) -> tuple[Optional[LookupResult], bool]:
        key = (normalize_path(path), only_directories)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False
            if entry.expires_at <= now:
                del self._entries[key]
                return None, False
            return entry.result, True

    def set(self, path: str, result: LookupResult, ttl_sec: Optional[float] = None) -> None:
        key = (normalize_path(path), result.only_directories)
        ttl = self._ttl_sec if ttl_sec is None else ttl_sec
        with self._lock:
            self._entries[key] = _Entry(result=result, expires_at=self._clock() + ttl)

    def delete(self, path: str) -> None:
        """Drop both slots of ``path``."""
        name = normalize_path(path)
        logger.debug("invalidate %r", name or "/")
        with self._lock:
            self._entries.pop((name, False), None)
            self._entries.pop((name, True), None)

    def delete_tree(self, path: str) -> None:
        """Drop ``path`` and every cached path below it."""
        name = normalize_path(path)
        logger.debug("invalidate tree %r", name or "/")
        with self._lock:
            if name == ROOT_KEY:
                self._entries.clear()
                return
            prefix = name + "/"
            stale = [k for k in self._entries if k[0] == name or k[0].startswith(prefix)]
            for k in stale:
                del self._entries[k]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def evict_expired(self) -> int:
        """Remove expired entries now; returns how many were dropped."""
        now = self._clock()
        with self._lock:
            stale = [k for k, e in self._entries.items() if e.expires_at <= now]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ----------------------------
    # Background sweep
    # ----------------------------
    def start_sweeper(self, interval_sec: float) -> None:
        """Evict expired entries every ``interval_sec`` on a daemon thread."""
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        if self._sweeper is not None:
            return
        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop,
            args=(interval_sec,),
            name="gdrivedav-cache-sweeper",
            daemon=True,
        )
        self._sweeper.start()

    def close(self) -> None:
        """Stop the sweeper (if running). Entries are kept."""
        sweeper = self._sweeper
        if sweeper is None:
            return
        self._stop.set()
        sweeper.join()
        self._sweeper = None

    def _sweep_loop(self, interval_sec: float) -> None:
        while not self._stop.wait(interval_sec):
            dropped = self.evict_expired()
            if dropped:
                logger.debug("swept %d expired entries", dropped)
