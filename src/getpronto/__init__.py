"""getpronto -- Python SDK for the Get Pronto file and image API.

Public re-exports
-----------------

* **Clients:** :class:`GetProntoClient`, :class:`AsyncGetProntoClient`
* **Configuration:** :class:`GetProntoConfig`
* **Errors:** Every :class:`GetProntoError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses, enums, and upload types
* **MIME registry:** :class:`MimeRegistry`

Usage::

    from getpronto import GetProntoClient

    client = GetProntoClient(api_key="pk_xxx")
    result = client.files.upload(b"hello", filename="hello.txt")
    print(result.data.secure_url)
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from getpronto.async_client import AsyncGetProntoClient
from getpronto.client import GetProntoClient

# ── Configuration ───────────────────────────────────────────────────────
from getpronto.config import DEFAULT_BASE_URL, GetProntoConfig

# ── Errors ──────────────────────────────────────────────────────────────
from getpronto.errors import (
    ErrorCode,
    GetProntoAPIError,
    GetProntoEnvironmentError,
    GetProntoError,
    GetProntoFileReadError,
    GetProntoInvalidDataUrlError,
    GetProntoNetworkError,
    GetProntoRemoteFetchError,
    GetProntoTransformFetchError,
    GetProntoUnsupportedInputError,
    GetProntoUploadInputError,
    GetProntoValidationError,
)

# ── Images ──────────────────────────────────────────────────────────────
from getpronto.images import AsyncImageTransformer, ImageTransformer

# ── MIME registry ───────────────────────────────────────────────────────
from getpronto.mime import DEFAULT_ALLOWED_FILE_TYPES, MimeRegistry

# ── Models ──────────────────────────────────────────────────────────────
from getpronto.models import (
    APIResponse,
    FileHandle,
    FileMetadata,
    ImageFit,
    ImageFormat,
    PaginatedFiles,
    Pagination,
    TransformOptions,
    UploadOptions,
    UploadPayload,
    UploadSourceType,
)

__version__ = "0.1.0"

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "GetProntoClient",
    "AsyncGetProntoClient",
    # Configuration
    "GetProntoConfig",
    "DEFAULT_BASE_URL",
    # Error base + code enum
    "GetProntoError",
    "ErrorCode",
    # Upload input errors
    "GetProntoUploadInputError",
    "GetProntoUnsupportedInputError",
    "GetProntoInvalidDataUrlError",
    "GetProntoEnvironmentError",
    "GetProntoFileReadError",
    "GetProntoRemoteFetchError",
    # Image errors
    "GetProntoValidationError",
    "GetProntoTransformFetchError",
    # API / transport errors
    "GetProntoAPIError",
    "GetProntoNetworkError",
    # Images
    "ImageTransformer",
    "AsyncImageTransformer",
    # MIME registry
    "MimeRegistry",
    "DEFAULT_ALLOWED_FILE_TYPES",
    # Models
    "APIResponse",
    "FileHandle",
    "FileMetadata",
    "PaginatedFiles",
    "Pagination",
    "TransformOptions",
    "UploadOptions",
    "UploadPayload",
    # Models: enums
    "ImageFit",
    "ImageFormat",
    "UploadSourceType",
]
