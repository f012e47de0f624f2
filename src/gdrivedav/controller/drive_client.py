"""Google Drive API client used by the filesystem (internal use only)."""

from __future__ import annotations

import io
import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, TypeVar

from gdrivedav.call_context import CallContext
from gdrivedav.errors import (
    ApiError,
    CancelledError,
    GDriveDavError,
    HttpErrorInfo,
    NetworkError,
    RateLimitError,
    map_http_error,
)
from gdrivedav.models import RemoteObject
from gdrivedav.util.mime import FOLDER_MIME
from gdrivedav.util.time import parse_rfc3339

from .fields import FILE_FIELDS, LIST_FIELDS

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Uploads above this size go through the resumable protocol.
RESUMABLE_THRESHOLD: int = 5 * 1024 * 1024

DEFAULT_MIME: str = "application/octet-stream"


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class DriveClient:
    """
    Thin, ID-addressed wrapper over the Drive v3 ``files`` resource.

    Notes:
        - Drive service objects are not thread safe, so each thread gets its
          own service from ``service_factory``.
        - ``supports_all_drives`` is applied to all requests consistently.
        - Rate limits, network errors and 5xx responses are retried with
          exponential back-off; every attempt first checks the CallContext.
    """

    def __init__(
        self,
        service_factory: Callable[[], Any],
        *,
        supports_all_drives: bool = True,
        max_retries: int = 3,
    ) -> None:
        self._service_factory = service_factory
        self._supports_all_drives = supports_all_drives
        self._retry_policy = _RetryPolicy(max_retries=max_retries)
        self._local = threading.local()

    @classmethod
    def from_service(
        cls,
        service: Any,
        *,
        supports_all_drives: bool = True,
        max_retries: int = 3,
    ) -> "DriveClient":
        """Create a client around one pre-built service (useful for tests)."""
        return cls(
            lambda: service,
            supports_all_drives=supports_all_drives,
            max_retries=max_retries,
        )

    @property
    def _service(self) -> Any:
        service = getattr(self._local, "service", None)
        if service is None:
            service = self._service_factory()
            self._local.service = service
        return service

    # ----------------------------
    # Public API
    # ----------------------------
    def get(self, file_id: str, ctx: Optional[CallContext] = None) -> RemoteObject:
        req = self._service.files().get(
            fileId=file_id,
            fields=FILE_FIELDS,
            **self._common_get_kwargs(),
        )
        data = self._execute(req.execute, ctx)
        return _file_dict_to_remote_object(data)

    def list_children(
        self,
        parent_id: str,
        *,
        name: Optional[str] = None,
        folder_only: bool = False,
        ctx: Optional[CallContext] = None,
    ) -> list[RemoteObject]:
        """
        List children of ``parent_id``, optionally only those named ``name``.

        Results are ordered oldest first, so a name lookup that matches
        several siblings keeps picking the same one.
        """
        q = build_children_query(
            parent_id,
            name=name,
            folder_only=folder_only,
        )
        logger.debug("Drive query: %s", q)
        return self._find_by_query(q, ctx, order_by="createdTime")

    def create(
        self,
        name: str,
        parent_id: str,
        *,
        mime_type: Optional[str] = None,
        content: Optional[bytes] = None,
        ctx: Optional[CallContext] = None,
    ) -> RemoteObject:
        """Create a file (optionally with content) or, given FOLDER_MIME, a folder."""
        body: dict[str, Any] = {"name": name, "parents": [parent_id]}
        if mime_type is not None:
            body["mimeType"] = mime_type

        kwargs: dict[str, Any] = {}
        if content is not None:
            from googleapiclient.http import MediaIoBaseUpload

            kwargs["media_body"] = MediaIoBaseUpload(
                io.BytesIO(content),
                mimetype=mime_type or DEFAULT_MIME,
                resumable=len(content) > RESUMABLE_THRESHOLD,
            )

        req = self._service.files().create(
            body=body,
            fields=FILE_FIELDS,
            **kwargs,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute, ctx)
        return _file_dict_to_remote_object(data)

    def create_folder(
        self,
        name: str,
        parent_id: str,
        ctx: Optional[CallContext] = None,
    ) -> RemoteObject:
        return self.create(name, parent_id, mime_type=FOLDER_MIME, ctx=ctx)

    def update(
        self,
        file_id: str,
        *,
        name: Optional[str] = None,
        app_properties: Optional[Mapping[str, Optional[str]]] = None,
        ctx: Optional[CallContext] = None,
    ) -> RemoteObject:
        """Patch metadata. An appProperties value of None removes that key."""
        body: dict[str, Any] = {}
        if name is not None:
            body["name"] = name
        if app_properties is not None:
            body["appProperties"] = dict(app_properties)

        req = self._service.files().update(
            fileId=file_id,
            body=body,
            fields=FILE_FIELDS,
            **self._common_write_kwargs(),
        )
        data = self._execute(req.execute, ctx)
        return _file_dict_to_remote_object(data)

    def delete(self, file_id: str, ctx: Optional[CallContext] = None) -> None:
        req = self._service.files().delete(
            fileId=file_id,
            **self._common_write_kwargs(),
        )
        self._execute(req.execute, ctx)

    def download(self, file_id: str, ctx: Optional[CallContext] = None) -> bytes:
        """Fetch the whole content of a file into memory."""
        from googleapiclient.http import MediaIoBaseDownload

        req = self._service.files().get_media(
            fileId=file_id,
            **self._common_get_kwargs(),
        )
        buf = io.BytesIO()
        downloader = MediaIoBaseDownload(buf, req)
        done = False
        while not done:
            _, done = self._execute(downloader.next_chunk, ctx)
        return buf.getvalue()

    # ----------------------------
    # Internals
    # ----------------------------
    def _common_get_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _common_list_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True, "includeItemsFromAllDrives": True}

    def _common_write_kwargs(self) -> dict[str, Any]:
        if not self._supports_all_drives:
            return {}
        return {"supportsAllDrives": True}

    def _find_by_query(
        self,
        q: str,
        ctx: Optional[CallContext],
        *,
        order_by: Optional[str] = None,
    ) -> list[RemoteObject]:
        all_files: list[RemoteObject] = []
        page_token: Optional[str] = None

        extra: dict[str, Any] = {}
        if order_by:
            extra["orderBy"] = order_by

        while True:
            req = self._service.files().list(
                q=q,
                fields=LIST_FIELDS,
                pageToken=page_token,
                **extra,
                **self._common_list_kwargs(),
            )
            data = self._execute(req.execute, ctx)
            for f in data.get("files", []):
                all_files.append(_file_dict_to_remote_object(f))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return all_files

    def _execute(self, func: Callable[[], T], ctx: Optional[CallContext]) -> T:
        delay = self._retry_policy.initial_delay_sec
        for attempt in range(self._retry_policy.max_retries + 1):
            if ctx is not None:
                ctx.check()
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < self._retry_policy.max_retries:
                    logger.debug(
                        "Retrying Drive call after %s (attempt %d, delay %.1fs)",
                        type(mapped).__name__,
                        attempt + 1,
                        delay,
                    )
                    if ctx is not None:
                        ctx.sleep(delay)
                    else:
                        time.sleep(delay)
                    delay *= 2
                    continue
                if not isinstance(mapped, CancelledError):
                    logger.error("Drive call failed: %s", mapped)
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> Exception:
        from googleapiclient.errors import HttpError

        if isinstance(exc, GDriveDavError):
            return exc

        if isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Drive API error", cause=exc)


def escape_query_value(value: str) -> str:
    """Escape a string literal for the Drive ``q`` query language."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_children_query(
    parent_id: str,
    *,
    name: Optional[str] = None,
    folder_only: bool = False,
) -> str:
    q = f"'{escape_query_value(parent_id)}' in parents"
    if name is not None:
        q += f" and name = '{escape_query_value(name)}'"
    if folder_only:
        q += f" and mimeType = '{FOLDER_MIME}'"
    q += " and trashed = false"
    return q


def _file_dict_to_remote_object(data: dict[str, Any]) -> RemoteObject:
    file_id = data.get("id")
    name = data.get("name", "")
    mime_type = data.get("mimeType", "")
    parents = data.get("parents", []) or []

    size = None
    if isinstance(data.get("size"), str) and data["size"].isdigit():
        size = int(data["size"])
    elif isinstance(data.get("size"), int):
        size = data["size"]

    md5 = data.get("md5Checksum")
    app_properties = data.get("appProperties") or {}

    return RemoteObject(
        file_id=file_id if isinstance(file_id, str) else "",
        name=name if isinstance(name, str) else "",
        mime_type=mime_type if isinstance(mime_type, str) else "",
        parents=tuple(parents) if isinstance(parents, list) else (),
        trashed=bool(data.get("trashed", False)),
        size=size,
        created_time=_parse_time(data.get("createdTime")),
        modified_time=_parse_time(data.get("modifiedTime")),
        md5_checksum=md5 if isinstance(md5, str) else None,
        app_properties={
            str(k): str(v) for k, v in app_properties.items() if v is not None
        }
        if isinstance(app_properties, dict)
        else {},
    )


def _parse_time(value: Any):
    if not isinstance(value, str):
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        logger.warning("Ignoring unparsable Drive timestamp %r", value)
        return None


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        try:
            status_code = int(status_code)
        except (TypeError, ValueError):
            status_code = 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details or None,
    )
