"""gdrivedav public API."""

from __future__ import annotations

from gdrivedav.auth import OAuthClient
from gdrivedav.cache import ResolutionCache
from gdrivedav.call_context import CallContext
from gdrivedav.config import DavConfig
from gdrivedav.context import DriveContext
from gdrivedav.controller import DriveClient
from gdrivedav.errors import (
    AlreadyExistsError,
    ApiError,
    AuthError,
    CancelledError,
    ConflictError,
    GDriveDavError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    RemoteError,
    UnsupportedOperationError,
    map_http_error,
    status_for_error,
)
from gdrivedav.files import DirectoryFile, DriveFile, ReadOnlyFile, WritableFile
from gdrivedav.filesystem import DriveFileSystem
from gdrivedav.logs import configure_logging
from gdrivedav.models import FileMetadata, LookupResult, RemoteObject, ResolvedEntry
from gdrivedav.resolver import PathResolver

__all__ = [
    # High-level
    "DriveContext",
    "DriveFileSystem",
    "DavConfig",
    "CallContext",
    "configure_logging",
    # Building blocks
    "DriveClient",
    "OAuthClient",
    "PathResolver",
    "ResolutionCache",
    # Handles
    "DriveFile",
    "ReadOnlyFile",
    "DirectoryFile",
    "WritableFile",
    # Models
    "RemoteObject",
    "ResolvedEntry",
    "LookupResult",
    "FileMetadata",
    # Errors
    "GDriveDavError",
    "NotFoundError",
    "AlreadyExistsError",
    "UnsupportedOperationError",
    "InvalidStateError",
    "CancelledError",
    "RemoteError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
    "status_for_error",
]
