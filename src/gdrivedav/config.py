"""Runtime configuration for gdrivedav."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX: str = "GDRIVEDAV_"

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)


@dataclass(slots=True, frozen=True)
class DavConfig:
    """
    Settings for one filesystem instance.

    Required:
        - client_secrets_file: OAuth client secrets JSON.
        - token_file: where the authorized-user token is cached.
    """

    client_secrets_file: str
    token_file: str
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    root_id: str = "root"
    cache_ttl_sec: float = 60.0
    cache_sweep_interval_sec: float = 30.0
    supports_all_drives: bool = True
    request_timeout_sec: float = 60.0
    max_retries: int = 3
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        for key in ("client_secrets_file", "token_file", "root_id"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"DavConfig.{key} must be a non-empty string")

        if not self.scopes or not all(isinstance(s, str) and s.strip() for s in self.scopes):
            raise ValueError("DavConfig.scopes must be a non-empty sequence of strings")
        if self.cache_ttl_sec <= 0:
            raise ValueError("DavConfig.cache_ttl_sec must be positive")
        if self.cache_sweep_interval_sec < 0:
            raise ValueError("DavConfig.cache_sweep_interval_sec must not be negative")
        if self.request_timeout_sec <= 0:
            raise ValueError("DavConfig.request_timeout_sec must be positive")
        if self.max_retries < 0:
            raise ValueError("DavConfig.max_retries must not be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> DavConfig:
        """
        Build a config from ``GDRIVEDAV_*`` environment variables.

        Unset variables keep their defaults; CLIENT_SECRETS and TOKEN_FILE
        are required. SCOPES is comma-separated.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name, "").strip()
            return value or None

        kwargs: dict[str, object] = {
            "client_secrets_file": get("CLIENT_SECRETS") or "",
            "token_file": get("TOKEN_FILE") or "",
        }

        scopes = get("SCOPES")
        if scopes:
            kwargs["scopes"] = tuple(s.strip() for s in scopes.split(",") if s.strip())
        if get("ROOT_ID"):
            kwargs["root_id"] = get("ROOT_ID")
        if get("LOG_LEVEL"):
            kwargs["log_level"] = get("LOG_LEVEL")

        for name, key in (
            ("CACHE_TTL", "cache_ttl_sec"),
            ("CACHE_SWEEP_INTERVAL", "cache_sweep_interval_sec"),
            ("REQUEST_TIMEOUT", "request_timeout_sec"),
        ):
            raw = get(name)
            if raw is not None:
                kwargs[key] = _parse_number(name, raw, float)

        raw = get("MAX_RETRIES")
        if raw is not None:
            kwargs["max_retries"] = _parse_number("MAX_RETRIES", raw, int)

        raw = get("SUPPORTS_ALL_DRIVES")
        if raw is not None:
            kwargs["supports_all_drives"] = _parse_bool("SUPPORTS_ALL_DRIVES", raw)

        return cls(**kwargs)  # type: ignore[arg-type]


def _parse_number(name: str, raw: str, kind: type):
    try:
        return kind(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")
