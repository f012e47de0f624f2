"""Per-request cancellation and deadlines."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from gdrivedav.errors import CancelledError


@dataclass(slots=True, frozen=True)
class CallContext:
    """
    Cancellation signal carried into every Drive call made for one request.

    Attributes:
        cancel_event: set by the host when the request is abandoned.
        deadline: absolute ``time.monotonic()`` value after which calls fail.
    """

    cancel_event: threading.Event = field(default_factory=threading.Event)
    deadline: Optional[float] = None

    @classmethod
    def with_timeout(cls, seconds: float) -> CallContext:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise CancelledError if the caller gave up."""
        if self.cancel_event.is_set():
            raise CancelledError("operation cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise CancelledError("deadline exceeded", details={"deadline": self.deadline})

    def sleep(self, seconds: float) -> None:
        """Back off for ``seconds``, waking early (and raising) on cancellation."""
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self.cancel_event.wait(remaining)
            self.check()
            raise CancelledError("deadline exceeded", details={"deadline": self.deadline})
        if self.cancel_event.wait(seconds):
            self.check()
