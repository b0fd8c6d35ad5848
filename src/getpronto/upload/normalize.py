"""Upload input normalization.

Turns any supported upload source into a single :class:`FileHandle`
payload (content, filename, MIME type) ready for the multipart upload.

Resolution rules per source type:

* **File handle** -- keep its name and type unless overridden; a generic
  or missing type is inferred from the filename.  The original handle is
  returned as-is when nothing changes.
* **Byte buffer** -- named ``"file"`` unless overridden; type inferred.
* **Local path** -- named after the last path segment; type inferred.
* **Data URL** -- type taken from the URL itself; named ``file.<ext>``.
* **Remote URL** -- downloaded first; name from ``Content-Disposition``,
  then the URL path, then ``"download"``; type from ``Content-Type``,
  falling back to inference.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import re
import sys
from dataclasses import replace
from os import PathLike, fspath
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import httpx

from getpronto.errors import (
    GetProntoEnvironmentError,
    GetProntoFileReadError,
    GetProntoInvalidDataUrlError,
    GetProntoRemoteFetchError,
)
from getpronto.mime import OCTET_STREAM, MimeRegistry
from getpronto.models import FileHandle, UploadOptions, UploadSourceType
from getpronto.observability import get_logger

from .detect import detect_upload_source

log = get_logger("getpronto.upload")

_DATA_URL_RE = re.compile(r"data:([a-zA-Z0-9]+/[a-zA-Z0-9.+-]+);base64,(.*)")

_CONTENT_DISPOSITION_RE = re.compile(r'filename="(.+)"')

_PATH_SEPARATORS_RE = re.compile(r"[/\\]")

# Runtimes that run Python without access to a real local filesystem.
_NO_FILESYSTEM_PLATFORMS = frozenset({"emscripten", "wasi"})

DEFAULT_BUFFER_FILENAME = "file"
DEFAULT_DOWNLOAD_FILENAME = "download"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _overrides(options: UploadOptions | None) -> tuple[str | None, str | None]:
    """Return ``(filename, mime_type)`` overrides with empty values as ``None``."""
    if options is None:
        return None, None
    return options.filename or None, options.mime_type or None


def _truncate_src(src: str, max_len: int = 200) -> str:
    """Truncate a source string for inclusion in error context."""
    if len(src) <= max_len:
        return src
    return src[:max_len] + "..."


def _has_local_filesystem() -> bool:
    return sys.platform not in _NO_FILESYSTEM_PLATFORMS


def filename_from_path(path: str) -> str:
    """Return the last segment of *path*, splitting on ``/`` and ``\\``."""
    return _PATH_SEPARATORS_RE.split(path)[-1]


def filename_from_url(url: str) -> str:
    """Return the last non-empty path segment of *url* (query stripped).

    Falls back to ``"download"`` when the URL has no usable path.
    """
    segments = [seg for seg in urlsplit(url).path.split("/") if seg]
    return segments[-1] if segments else DEFAULT_DOWNLOAD_FILENAME


def filename_from_content_disposition(header: str | None) -> str | None:
    """Extract ``filename="..."`` from a ``Content-Disposition`` header."""
    if not header:
        return None
    match = _CONTENT_DISPOSITION_RE.search(header)
    if match is None:
        return None
    return match.group(1)


def mime_type_from_content_type(header: str | None) -> str | None:
    """Strip parameters (``; charset=...``) from a ``Content-Type`` header."""
    if not header:
        return None
    mime_type = header.split(";", 1)[0].strip()
    return mime_type or None


# ---------------------------------------------------------------------------
# Pure normalizers
# ---------------------------------------------------------------------------

def from_file_handle(
    handle: FileHandle,
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    """Apply overrides to an existing handle, copying only on change."""
    filename, mime_type = _overrides(options)
    filename = filename or handle.name
    mime_type = mime_type or handle.mime_type
    if not mime_type or mime_type == OCTET_STREAM:
        mime_type = registry.mime_type_from_filename(filename)

    if filename == handle.name and mime_type == handle.mime_type:
        return handle
    return replace(handle, name=filename, mime_type=mime_type)


def from_bytes(
    buffer: bytes | bytearray | memoryview,
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    """Wrap raw bytes into a named, typed handle."""
    filename, mime_type = _overrides(options)
    filename = filename or DEFAULT_BUFFER_FILENAME
    mime_type = mime_type or registry.mime_type_from_filename(filename)
    return FileHandle(content=bytes(buffer), name=filename, mime_type=mime_type)


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Parse a base64 ``data:`` URL into ``(mime_type, content)``.

    Raises
    ------
    GetProntoInvalidDataUrlError
        If the URL does not match ``data:<type>/<subtype>;base64,<payload>``
        or the payload is not valid base64.
    """
    match = _DATA_URL_RE.fullmatch(data_url)
    if match is None:
        raise GetProntoInvalidDataUrlError(
            message="Invalid data URL format",
            context={"src": _truncate_src(data_url), "reason": "regex_no_match"},
        )

    mime_type, payload = match.group(1), match.group(2)
    # Unpadded payloads are accepted; invalid characters still fail.
    padded = payload + "=" * (-len(payload) % 4)
    try:
        content = base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise GetProntoInvalidDataUrlError(
            message="Failed to decode base64 data URL",
            context={"src": _truncate_src(data_url), "reason": "base64_decode_error"},
            cause=exc,
        ) from exc
    return mime_type, content


def from_data_url(
    data_url: str,
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    """Decode a data URL into a handle.

    The MIME type embedded in the URL always wins; a caller ``mime_type``
    override is ignored (a warning is logged when it differs).
    """
    mime_type, content = parse_data_url(data_url)
    filename, override_mime = _overrides(options)

    if override_mime is not None and override_mime != mime_type:
        log.warning(
            "Ignoring mime_type override for data URL",
            extra={
                "extra_fields": {
                    "op": "normalize",
                    "embedded_mime": mime_type,
                    "override_mime": override_mime,
                }
            },
        )

    filename = filename or f"file.{registry.extension_from_mime_type(mime_type)}"
    return FileHandle(content=content, name=filename, mime_type=mime_type)


def from_remote_response(
    url: str,
    response: httpx.Response,
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    """Build a handle from a successful download of *url*."""
    filename, mime_type = _overrides(options)

    if filename is None:
        filename = (
            filename_from_content_disposition(response.headers.get("content-disposition"))
            or filename_from_url(url)
        )

    if mime_type is None:
        mime_type = mime_type_from_content_type(response.headers.get("content-type"))
        if not mime_type or mime_type == OCTET_STREAM:
            mime_type = registry.mime_type_from_filename(filename)

    return FileHandle(content=response.content, name=filename, mime_type=mime_type)


# ---------------------------------------------------------------------------
# I/O-bound normalizers
# ---------------------------------------------------------------------------

def _check_local_access(path: str) -> None:
    if not _has_local_filesystem():
        raise GetProntoEnvironmentError(
            message="File path access is not supported in this environment",
            context={"path": path, "platform": sys.platform},
        )


def _local_handle(
    path: str,
    content: bytes,
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    filename, mime_type = _overrides(options)
    filename = filename or filename_from_path(path)
    mime_type = mime_type or registry.mime_type_from_filename(filename)
    return FileHandle(content=content, name=filename, mime_type=mime_type)


def _file_read_error(path: str, exc: OSError) -> GetProntoFileReadError:
    return GetProntoFileReadError(
        message=f"Failed to read file from path: {exc}",
        context={"path": path},
        cause=exc,
    )


def from_local_path(
    path: str | PathLike[str],
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    """Read a local file into a handle.

    Raises
    ------
    GetProntoEnvironmentError
        If the runtime has no local filesystem.
    GetProntoFileReadError
        If the file cannot be read.
    """
    path_str = fspath(path)
    _check_local_access(path_str)
    try:
        content = Path(path_str).read_bytes()
    except OSError as exc:
        raise _file_read_error(path_str, exc) from exc
    return _local_handle(path_str, content, options, registry)


async def async_from_local_path(
    path: str | PathLike[str],
    options: UploadOptions | None,
    registry: MimeRegistry,
) -> FileHandle:
    """Read a local file into a handle without blocking the event loop.

    See :func:`from_local_path` for error semantics.
    """
    path_str = fspath(path)
    _check_local_access(path_str)
    loop = asyncio.get_running_loop()
    try:
        content = await loop.run_in_executor(None, Path(path_str).read_bytes)
    except OSError as exc:
        raise _file_read_error(path_str, exc) from exc
    return _local_handle(path_str, content, options, registry)


def _check_remote_response(url: str, response: httpx.Response) -> None:
    if response.is_success:
        return
    raise GetProntoRemoteFetchError(
        message=(
            f"Failed to fetch remote file: {response.status_code} "
            f"{response.reason_phrase}"
        ),
        context={
            "url": url,
            "status_code": response.status_code,
            "status_text": response.reason_phrase,
        },
    )


def _remote_transport_error(url: str, exc: httpx.TransportError) -> GetProntoRemoteFetchError:
    return GetProntoRemoteFetchError(
        message=f"Failed to fetch remote file: {exc}",
        context={"url": url},
        cause=exc,
    )


def from_remote_url(
    url: str,
    options: UploadOptions | None,
    registry: MimeRegistry,
    transport: Any,
) -> FileHandle:
    """Download *url* through ``transport.fetch`` and build a handle.

    Raises
    ------
    GetProntoRemoteFetchError
        On a non-2xx response or a transport failure.
    """
    try:
        response = transport.fetch(url)
    except httpx.TransportError as exc:
        raise _remote_transport_error(url, exc) from exc
    _check_remote_response(url, response)
    return from_remote_response(url, response, options, registry)


async def async_from_remote_url(
    url: str,
    options: UploadOptions | None,
    registry: MimeRegistry,
    transport: Any,
) -> FileHandle:
    """Async equivalent of :func:`from_remote_url`."""
    try:
        response = await transport.fetch(url)
    except httpx.TransportError as exc:
        raise _remote_transport_error(url, exc) from exc
    _check_remote_response(url, response)
    return from_remote_response(url, response, options, registry)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def _log_normalized(source_type: UploadSourceType, payload: FileHandle) -> None:
    log.debug(
        "Upload source normalized",
        extra={
            "extra_fields": {
                "op": "normalize",
                "source_type": source_type.value,
                "filename": payload.name,
                "mime_type": payload.mime_type,
                "size": payload.size,
            }
        },
    )


def normalize_upload(
    source: Any,
    options: UploadOptions | None,
    registry: MimeRegistry,
    transport: Any,
) -> tuple[FileHandle, UploadSourceType]:
    """Normalize any supported upload source into a :class:`FileHandle`.

    Parameters
    ----------
    source:
        File handle, bytes-like object, local path, data URL, or remote URL.
    options:
        Optional filename / MIME type overrides.
    registry:
        MIME registry used for inference.
    transport:
        Object with a ``fetch(url)`` method, used for remote URLs only.

    Returns
    -------
    tuple[FileHandle, UploadSourceType]
        The payload and the detected source type.

    Raises
    ------
    GetProntoUnsupportedInputError
        If *source* has none of the supported shapes.
    """
    source_type = detect_upload_source(source)

    if source_type == UploadSourceType.FILE_HANDLE:
        payload = from_file_handle(source, options, registry)
    elif source_type == UploadSourceType.BYTE_BUFFER:
        payload = from_bytes(source, options, registry)
    elif source_type == UploadSourceType.DATA_URL:
        payload = from_data_url(source, options, registry)
    elif source_type == UploadSourceType.REMOTE_URL:
        payload = from_remote_url(source, options, registry, transport)
    elif source_type == UploadSourceType.LOCAL_PATH:
        payload = from_local_path(source, options, registry)
    else:  # pragma: no cover - every enum member is handled above
        raise AssertionError(f"Unhandled upload source type: {source_type!r}")

    _log_normalized(source_type, payload)
    return payload, source_type


async def async_normalize_upload(
    source: Any,
    options: UploadOptions | None,
    registry: MimeRegistry,
    transport: Any,
) -> tuple[FileHandle, UploadSourceType]:
    """Async equivalent of :func:`normalize_upload`.

    Local reads run in the default executor and remote downloads use the
    async ``transport.fetch``.
    """
    source_type = detect_upload_source(source)

    if source_type == UploadSourceType.FILE_HANDLE:
        payload = from_file_handle(source, options, registry)
    elif source_type == UploadSourceType.BYTE_BUFFER:
        payload = from_bytes(source, options, registry)
    elif source_type == UploadSourceType.DATA_URL:
        payload = from_data_url(source, options, registry)
    elif source_type == UploadSourceType.REMOTE_URL:
        payload = await async_from_remote_url(source, options, registry, transport)
    elif source_type == UploadSourceType.LOCAL_PATH:
        payload = await async_from_local_path(source, options, registry)
    else:  # pragma: no cover - every enum member is handled above
        raise AssertionError(f"Unhandled upload source type: {source_type!r}")

    _log_normalized(source_type, payload)
    return payload, source_type
