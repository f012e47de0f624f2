"""Path resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from gdrivedav.errors import NotFoundError

from .remote_object import RemoteObject


@dataclass(slots=True, frozen=True)
class ResolvedEntry:
    """A Drive object together with the normalized path it was found at."""

    obj: RemoteObject
    path: str

    @property
    def file_id(self) -> str:
        return self.obj.file_id


@dataclass(slots=True, frozen=True)
class LookupResult:
    """
    Cached outcome of resolving one path.

    Either ``entry`` is set, or ``error_message`` (with ``error_details``)
    describes the NotFound outcome. ``only_directories`` records whether the
    lookup that produced it filtered to folders.
    """

    entry: Optional[ResolvedEntry] = None
    error_message: Optional[str] = None
    error_details: dict[str, Any] = field(default_factory=dict)
    only_directories: bool = False

    def __post_init__(self) -> None:
        if (self.entry is None) == (self.error_message is None):
            raise ValueError("LookupResult requires exactly one of entry or error_message")

    @classmethod
    def from_error(cls, exc: NotFoundError, *, only_directories: bool = False) -> LookupResult:
        return cls(
            error_message=str(exc),
            error_details=dict(exc.details),
            only_directories=only_directories,
        )

    @property
    def found(self) -> bool:
        return self.entry is not None

    def unwrap(self) -> ResolvedEntry:
        """Return the entry, or raise a new NotFoundError built from the outcome."""
        if self.entry is None:
            raise NotFoundError(self.error_message, details=dict(self.error_details))  # type: ignore[arg-type]
        return self.entry
