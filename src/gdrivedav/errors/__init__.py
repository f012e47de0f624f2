"""Public error exports for gdrivedav."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
