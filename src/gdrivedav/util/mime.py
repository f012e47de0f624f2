from __future__ import annotations

import mimetypes
from typing import Optional

FOLDER_MIME: str = "application/vnd.google-apps.folder"

GOOGLE_APPS_PREFIX: str = "application/vnd.google-apps."

# Google-apps types have no binary content; media download of them fails.
GOOGLE_APP_MIMES: set[str] = {
    "application/vnd.google-apps.document",
    "application/vnd.google-apps.spreadsheet",
    "application/vnd.google-apps.presentation",
    "application/vnd.google-apps.drawing",
    "application/vnd.google-apps.form",
    "application/vnd.google-apps.script",
    "application/vnd.google-apps.site",
}


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def is_google_app(mime_type: str) -> bool:
    """
    Returns True if the MIME type is a Google 'apps' type.

    Note: Some Google apps MIME types might not be listed in GOOGLE_APP_MIMES;
    all of them start with 'application/vnd.google-apps.'.
    """
    if mime_type in GOOGLE_APP_MIMES:
        return True
    return mime_type.startswith(GOOGLE_APPS_PREFIX)


def is_download_disallowed(mime_type: str) -> bool:
    """Folders and Google-apps documents cannot be fetched via media download."""
    return is_folder(mime_type) or is_google_app(mime_type)


def guess_mime_type(name: str) -> Optional[str]:
    """Guess a content type from a file name; None lets Drive detect it."""
    guessed, _ = mimetypes.guess_type(name, strict=False)
    return guessed
