"""Upload pipeline: detect and normalize upload sources.

Exports
-------
detect_upload_source
    Classify an input as file handle, byte buffer, local path, data URL
    or remote URL.
normalize_upload / async_normalize_upload
    Turn any supported input into a single :class:`FileHandle` payload.
parse_data_url
    Decode a base64 ``data:`` URL.
"""

from .detect import detect_upload_source
from .normalize import (
    async_normalize_upload,
    filename_from_path,
    filename_from_url,
    normalize_upload,
    parse_data_url,
)

__all__ = [
    "async_normalize_upload",
    "detect_upload_source",
    "filename_from_path",
    "filename_from_url",
    "normalize_upload",
    "parse_data_url",
]
