"""Public data models for the getpronto SDK.

This module contains every result type, enum, and supporting dataclass
referenced by the public API surface.  All types are plain dataclasses
with no behaviour beyond what is needed for (de)serialisation and
structural equality.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class UploadSourceType(str, Enum):
    """Classification of an upload input."""

    FILE_HANDLE = "file_handle"
    """An in-memory :class:`FileHandle` with its own name and MIME type."""

    BYTE_BUFFER = "byte_buffer"
    """Raw ``bytes`` / ``bytearray`` / ``memoryview`` content."""

    LOCAL_PATH = "local_path"
    """A path to a file on the local filesystem."""

    DATA_URL = "data_url"
    """Content encoded inline as a ``data:<mime>;base64,`` URL."""

    REMOTE_URL = "remote_url"
    """An ``http://`` or ``https://`` URL to download first."""


class ImageFit(str, Enum):
    """How a resized image fits the requested box."""

    COVER = "cover"
    CONTAIN = "contain"
    FILL = "fill"
    INSIDE = "inside"
    OUTSIDE = "outside"


class ImageFormat(str, Enum):
    """Output formats the transform service can render."""

    JPEG = "jpeg"
    JPG = "jpg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FileHandle:
    """An in-memory file: content plus intrinsic name and MIME type.

    This is both an accepted upload input and the normalized payload the
    upload pipeline hands to the transport.

    Attributes
    ----------
    content:
        Raw file bytes.
    name:
        File name including extension.
    mime_type:
        MIME type, or ``""`` if unknown.
    """

    content: bytes
    name: str
    mime_type: str = ""

    def __repr__(self) -> str:
        return (
            f"FileHandle(name={self.name!r}, mime_type={self.mime_type!r}, "
            f"size={len(self.content)})"
        )

    @property
    def size(self) -> int:
        return len(self.content)


UploadPayload = FileHandle


@dataclass(frozen=True)
class UploadOptions:
    """Caller overrides for an upload.  ``None`` or ``""`` means infer."""

    filename: str | None = None
    mime_type: str | None = None


# ---------------------------------------------------------------------------
# Image transforms
# ---------------------------------------------------------------------------

@dataclass
class TransformOptions:
    """Accumulated image transformation parameters.

    Field names match the wire format of the ``transform-url`` endpoint.
    Unset fields are ``None`` and are omitted by :meth:`to_dict`.
    """

    w: int | None = None
    h: int | None = None
    fit: ImageFit | None = None
    q: int | None = None
    blur: float | None = None
    sharp: bool | None = None
    gray: bool | None = None
    rot: float | None = None
    border: str | None = None
    crop: str | None = None
    format: ImageFormat | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the compact request body, dropping unset fields."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            result[key] = value.value if isinstance(value, Enum) else value
        return result


# ---------------------------------------------------------------------------
# Server records
# ---------------------------------------------------------------------------

@dataclass
class FileMetadata:
    """A file record as returned by the Get Pronto API.

    Attributes
    ----------
    id:
        Server-assigned file id.
    name:
        Stored file name.
    secure_url / secure_thumbnail_url / raw_url:
        CDN URLs for the file, its thumbnail and the raw object.
    type / raw_type:
        Human-readable type and raw MIME type.
    size / raw_size:
        Human-readable size (e.g. ``"1.2 MB"``) and size in bytes.
    updated / raw_updated:
        Formatted and raw last-update timestamps.
    """

    id: str
    name: str = ""
    secure_url: str = ""
    secure_thumbnail_url: str = ""
    raw_url: str = ""
    type: str = ""
    raw_type: str = ""
    size: str = ""
    raw_size: int = 0
    updated: str = ""
    raw_updated: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileMetadata:
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            secure_url=data.get("secureUrl", ""),
            secure_thumbnail_url=data.get("secureThumbnailUrl", ""),
            raw_url=data.get("rawUrl", ""),
            type=data.get("type", ""),
            raw_type=data.get("rawType", ""),
            size=data.get("size", ""),
            raw_size=data.get("rawSize", 0),
            updated=data.get("updated", ""),
            raw_updated=data.get("rawUpdated", ""),
        )


@dataclass
class Pagination:
    """Paging information attached to list responses."""

    page: int = 1
    page_size: int = 0
    total_count: int = 0
    total_pages: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pagination:
        return cls(
            page=data.get("page", 1),
            page_size=data.get("pageSize", 0),
            total_count=data.get("totalCount", 0),
            total_pages=data.get("totalPages", 0),
        )


@dataclass
class PaginatedFiles:
    """One page of file records."""

    items: list[FileMetadata] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PaginatedFiles:
        return cls(
            items=[FileMetadata.from_dict(item) for item in data.get("items", [])],
            pagination=Pagination.from_dict(data.get("pagination", {})),
        )


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------

@dataclass
class APIResponse(Generic[T]):
    """Envelope returned by every API call.

    Attributes
    ----------
    data:
        Parsed payload.  ``None`` when the body was empty or not JSON.
    status:
        HTTP status code.
    headers:
        Response headers (lower-cased names).
    """

    data: T
    status: int
    headers: dict[str, str] = field(default_factory=dict)
