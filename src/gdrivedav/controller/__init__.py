"""Internal Drive client exports for gdrivedav."""

from __future__ import annotations

from .drive_client import DriveClient

__all__ = ["DriveClient"]
