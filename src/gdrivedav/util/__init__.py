from .mime import (
    FOLDER_MIME,
    GOOGLE_APP_MIMES,
    guess_mime_type,
    is_download_disallowed,
    is_folder,
    is_google_app,
)
from .paths import (
    ROOT_KEY,
    display_path,
    normalize_path,
    split_path,
)
from .properties import (
    PropertyName,
    app_properties_patch,
    decode_property_key,
    encode_property_key,
    properties_from_app_properties,
)
from .time import normalize_dt, parse_rfc3339

__all__ = [
    "FOLDER_MIME",
    "GOOGLE_APP_MIMES",
    "is_folder",
    "is_google_app",
    "is_download_disallowed",
    "guess_mime_type",
    "ROOT_KEY",
    "normalize_path",
    "split_path",
    "display_path",
    "PropertyName",
    "encode_property_key",
    "decode_property_key",
    "properties_from_app_properties",
    "app_properties_patch",
    "parse_rfc3339",
    "normalize_dt",
]
