"""Slash-separated path helpers.

Internally a path is either ``""`` (the root) or ``/a/b`` with no trailing
slash. These are the keys of the resolution cache.
"""

from __future__ import annotations

import posixpath

ROOT_KEY: str = ""


def normalize_path(path: str) -> str:
    """Strip trailing slashes, collapse ``.``/``..``/``//``; root becomes ``""``."""
    if not path:
        return ROOT_KEY
    p = path.replace("\\", "/")
    if not p.startswith("/"):
        p = "/" + p
    p = posixpath.normpath(p)
    # normpath keeps a leading "//" (POSIX allows it to be special).
    if p.startswith("//"):
        p = "/" + p.lstrip("/")
    if p == "/":
        return ROOT_KEY
    return p


def split_path(path: str) -> tuple[str, str]:
    """Return ``(parent, base)`` of a normalized non-root path."""
    p = normalize_path(path)
    if p == ROOT_KEY:
        raise ValueError("the root path has no parent")
    parent, base = posixpath.split(p)
    return normalize_path(parent), base


def display_path(path: str) -> str:
    """The user-facing spelling of a normalized path (root is ``/``)."""
    p = normalize_path(path)
    return p or "/"
