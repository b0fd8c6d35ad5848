"""Upload source detection.

Classifies an upload input into one of the :class:`UploadSourceType`
variants so the normalizer knows how to turn it into a payload.
"""

from __future__ import annotations

import os
from typing import Any

from getpronto.errors import GetProntoUnsupportedInputError
from getpronto.models import FileHandle, UploadSourceType

_REMOTE_PREFIXES = ("http://", "https://")


def detect_upload_source(source: Any) -> UploadSourceType:
    """Detect which of the five supported shapes *source* has.

    Strings are checked in order: ``data:`` URL, then ``http(s)://`` URL,
    and anything else is treated as a local path.

    Parameters
    ----------
    source:
        A :class:`FileHandle`, a bytes-like object, an ``os.PathLike``, or
        a string.

    Returns
    -------
    UploadSourceType

    Raises
    ------
    GetProntoUnsupportedInputError
        If *source* has none of the supported shapes.
    """
    if isinstance(source, FileHandle):
        return UploadSourceType.FILE_HANDLE

    if isinstance(source, (bytes, bytearray, memoryview)):
        return UploadSourceType.BYTE_BUFFER

    if isinstance(source, str):
        if source.startswith("data:"):
            return UploadSourceType.DATA_URL
        if source.startswith(_REMOTE_PREFIXES):
            return UploadSourceType.REMOTE_URL
        return UploadSourceType.LOCAL_PATH

    if isinstance(source, os.PathLike):
        return UploadSourceType.LOCAL_PATH

    raise GetProntoUnsupportedInputError(
        message="Unsupported file type for upload",
        context={"input_type": type(source).__name__},
    )
