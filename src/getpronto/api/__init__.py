"""Low-level Get Pronto API wrappers.

Exports
-------
ProntoTransport / AsyncProntoTransport
    HTTP transports with auth headers and structured error mapping.
FileAPI / AsyncFileAPI
    Upload, list, get and delete files.
ImageAPI / AsyncImageAPI
    Create image transform builders.
"""

from .files import AsyncFileAPI, FileAPI
from .images import AsyncImageAPI, ImageAPI
from .transport import AsyncProntoTransport, ProntoTransport

__all__ = [
    "AsyncFileAPI",
    "AsyncImageAPI",
    "AsyncProntoTransport",
    "FileAPI",
    "ImageAPI",
    "ProntoTransport",
]
