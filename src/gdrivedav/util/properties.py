"""Encoding of WebDAV dead properties into Drive appProperties.

A property is named by ``(namespace, local_name)``. Drive only offers a flat
string map, so the name is packed as ``namespace + "!" + local_name`` and
query-escaped to keep it a single safe key.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional
from urllib.parse import quote_plus, unquote_plus

logger = logging.getLogger(__name__)

PropertyName = tuple[str, str]

_SEPARATOR = "!"


def encode_property_key(namespace: str, local_name: str) -> str:
    if not local_name:
        raise ValueError("local_name must be a non-empty string")
    return quote_plus(f"{namespace}{_SEPARATOR}{local_name}")


def decode_property_key(key: str) -> PropertyName:
    """Inverse of :func:`encode_property_key`. Raises ValueError on foreign keys."""
    raw = unquote_plus(key)
    namespace, sep, local_name = raw.partition(_SEPARATOR)
    if not sep or not local_name:
        raise ValueError(f"not a property key: {key!r}")
    return namespace, local_name


def properties_from_app_properties(
    app_properties: Mapping[str, str],
) -> dict[PropertyName, str]:
    """Decode Drive appProperties, skipping empty values and foreign keys."""
    props: dict[PropertyName, str] = {}
    for key, value in app_properties.items():
        if not value:
            continue
        try:
            name = decode_property_key(key)
        except ValueError:
            logger.warning("Skipping unexpected appProperties key %r", key)
            continue
        props[name] = value
    return props


def app_properties_patch(
    patches: Mapping[PropertyName, Optional[str]],
) -> dict[str, Optional[str]]:
    """Build a Drive appProperties patch; ``None`` removes the property."""
    return {
        encode_property_key(namespace, local_name): value
        for (namespace, local_name), value in patches.items()
    }
