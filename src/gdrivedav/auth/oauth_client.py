"""OAuth credentials and Drive service construction for gdrivedav."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Sequence

from gdrivedav.errors import AuthError, InvalidArgumentError

logger = logging.getLogger(__name__)


class OAuthClient:
    """
    Load, refresh and persist OAuth credentials, and build Drive services.

    The token file is the only state gdrivedav persists.
    """

    def __init__(self, client_secrets_file: str, token_file: str) -> None:
        for label, value in (
            ("client_secrets_file", client_secrets_file),
            ("token_file", token_file),
        ):
            if not isinstance(value, str) or not value.strip():
                raise InvalidArgumentError(f"{label} must be a non-empty string")
        self._client_secrets_file = client_secrets_file
        self._token_file = token_file

    @classmethod
    def from_config(cls, config) -> "OAuthClient":
        return cls(config.client_secrets_file, config.token_file)

    @property
    def token_file(self) -> str:
        return self._token_file

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True):
        """
        Return OAuth credentials for the given scopes.

        A cached token is refreshed when possible; otherwise the installed-app
        consent flow runs on a local port.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow

        creds = None
        if os.path.exists(self._token_file):
            try:
                creds = Credentials.from_authorized_user_file(
                    self._token_file,
                    scopes=list(scopes),
                )
            except (OSError, ValueError) as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": self._token_file},
                    cause=exc,
                ) from exc

            if not ensure_valid:
                return creds

            if not creds.valid and creds.refresh_token:
                logger.debug("Refreshing OAuth token from %s", self._token_file)
                try:
                    creds.refresh(Request())
                except Exception as exc:
                    raise AuthError(
                        "Failed to refresh OAuth credentials",
                        details={"token_file": self._token_file},
                        cause=exc,
                    ) from exc
                self._save_credentials(creds)

            if creds.valid:
                return creds

        logger.info("No usable token in %s, starting OAuth consent flow", self._token_file)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                self._client_secrets_file,
                scopes=list(scopes),
            )
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": self._client_secrets_file,
                    "token_file": self._token_file,
                },
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def service_factory(
        self,
        scopes: Sequence[str],
        *,
        timeout_sec: float,
    ) -> Callable[[], Any]:
        """
        Return a callable that builds a fresh Drive v3 service.

        Credentials are obtained once, here; each call of the factory gets its
        own HTTP transport (httplib2 connections must not be shared between
        threads). ``timeout_sec`` bounds every socket operation.
        """
        import httplib2
        from google_auth_httplib2 import AuthorizedHttp
        from googleapiclient.discovery import build

        creds = self.get_credentials(scopes, ensure_valid=True)

        def factory() -> Any:
            http = AuthorizedHttp(creds, http=httplib2.Http(timeout=timeout_sec))
            try:
                return build("drive", "v3", http=http, cache_discovery=False)
            except Exception as exc:
                raise AuthError("Failed to build Drive service", cause=exc) from exc

        return factory

    def _save_credentials(self, creds) -> None:
        token_dir = os.path.dirname(self._token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(self._token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": self._token_file},
                cause=exc,
            ) from exc
        logger.debug("Saved OAuth token to %s", self._token_file)
