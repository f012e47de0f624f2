"""Exception hierarchy and HTTP error mapping for gdrivedav."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveDavError(Exception):
    """
    Base exception for gdrivedav.

    Attributes:
        details: Optional structured information (e.g., path, HTTP status).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class NotFoundError(GDriveDavError):
    """Raised when a path (or its parent) does not resolve, or Drive answers 404."""


class AlreadyExistsError(GDriveDavError):
    """Raised when a create/rename target already resolves."""


class UnsupportedOperationError(GDriveDavError):
    """Raised for operations or open flags this filesystem does not implement."""


class InvalidStateError(GDriveDavError):
    """Raised when an object is used in an invalid state (e.g., a closed handle)."""


class CancelledError(GDriveDavError):
    """Raised when the caller's context is cancelled or its deadline has passed."""


class RemoteError(GDriveDavError):
    """Base for failures surfaced by the Drive API (auth, quota, network, ...)."""


class AuthError(RemoteError):
    """Raised when OAuth authentication/refresh fails."""


class PermissionError(RemoteError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class InvalidArgumentError(RemoteError):
    """Raised when request arguments are invalid (HTTP 400, etc.)."""


class ConflictError(RemoteError):
    """Raised when Drive reports a conflict (HTTP 409/412)."""


class RateLimitError(RemoteError):
    """Raised when rate-limited (HTTP 429)."""


class QuotaExceededError(RemoteError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NetworkError(RemoteError):
    """Raised when network/timeout issues prevent the request."""


class ApiError(RemoteError):
    """Raised for unclassified API errors (5xx, unknown 4xx, etc.)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivedav exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)

_RATE_LIMIT_REASONS: tuple[str, ...] = (
    "rateLimitExceeded",
    "userRateLimitExceeded",
)


def _reason_matches(reason: str | None, keywords: tuple[str, ...]) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in keywords)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GDriveDavError:
    """
    Map a Drive HTTP error to a gdrivedav exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> RateLimitError for per-user rate limits, QuotaExceededError
          for quota reasons, PermissionError otherwise
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise -> ApiError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        # Drive reports per-user rate limits as 403; they are retryable.
        if _reason_matches(info.reason, _RATE_LIMIT_REASONS):
            return RateLimitError(message, details=details, cause=cause)
        if _reason_matches(info.reason, _QUOTA_REASON_KEYWORDS):
            return QuotaExceededError(message, details=details, cause=cause)
        return PermissionError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return ApiError(message, details=details, cause=cause)


def status_for_error(exc: BaseException) -> int:
    """
    Return the HTTP status a WebDAV front end should answer with for ``exc``.

    NotFound and AlreadyExists are the ordinary "missing" / "conflict"
    signals; anything coming back from Drive is a generic server error.
    """
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AlreadyExistsError):
        return 409
    if isinstance(exc, UnsupportedOperationError):
        return 501
    if isinstance(exc, CancelledError):
        return 503
    return 500
