"""File resource API wrappers for the Get Pronto API.

Provides :class:`FileAPI` (sync) and :class:`AsyncFileAPI` (async) wrappers
for the ``/upload`` and ``/files`` endpoints.  Upload sources are
normalized by :mod:`getpronto.upload` before being sent as multipart form
data.
"""

from __future__ import annotations

from typing import Any

from getpronto.errors import GetProntoError
from getpronto.mime import MimeRegistry
from getpronto.models import (
    APIResponse,
    FileHandle,
    FileMetadata,
    PaginatedFiles,
    UploadOptions,
    UploadSourceType,
)
from getpronto.observability import NoopMetricsHook, get_logger
from getpronto.upload import async_normalize_upload, normalize_upload

from .transport import AsyncProntoTransport, ProntoTransport

log = get_logger("getpronto.upload")


def _upload_form(
    payload: FileHandle,
    source_type: UploadSourceType,
    options: UploadOptions,
) -> tuple[dict[str, Any], dict[str, Any] | None]:
    """Build ``(files, data)`` for the multipart upload request.

    ``customFilename`` is only sent for an explicit filename on sources
    that are not file handles (handles carry their name in the file part).
    """
    files = {"file": (payload.name, payload.content, payload.mime_type)}
    data: dict[str, Any] | None = None
    if options.filename and source_type != UploadSourceType.FILE_HANDLE:
        data = {"customFilename": options.filename}
    return files, data


def _list_params(page: int | None, page_size: int | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if page is not None:
        params["page"] = page
    if page_size is not None:
        params["pageSize"] = page_size
    return params


def _typed(response: APIResponse[Any], parse: Any) -> APIResponse[Any]:
    data = parse(response.data) if isinstance(response.data, dict) else response.data
    return APIResponse(data=data, status=response.status, headers=response.headers)


def _log_upload(metrics: Any, payload: FileHandle, source_type: UploadSourceType) -> None:
    metrics.increment(
        "getpronto.upload_success_total",
        tags={"source_type": source_type.value},
    )
    log.info(
        "File uploaded",
        extra={
            "extra_fields": {
                "op": "upload",
                "source_type": source_type.value,
                "filename": payload.name,
                "mime_type": payload.mime_type,
                "size": payload.size,
            }
        },
    )


def _log_upload_failure(metrics: Any, exc: GetProntoError) -> None:
    code = getattr(exc.code, "value", exc.code)
    metrics.increment("getpronto.upload_failure_total", tags={"code": code})


class _RegistryMixin:
    """Read-only views of the MIME registry exposed on the file API."""

    _registry: MimeRegistry

    @property
    def registry(self) -> MimeRegistry:
        return self._registry

    def is_allowed_mime_type(self, mime_type: str) -> bool:
        return self._registry.is_allowed(mime_type)

    def allowed_extensions(self) -> frozenset[str]:
        return self._registry.allowed_extensions()

    def allowed_mime_types(self) -> frozenset[str]:
        return self._registry.allowed_mime_types()


class FileAPI(_RegistryMixin):
    """Synchronous wrapper for the Get Pronto file endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`ProntoTransport` instance.
    registry:
        MIME registry used to infer types of uploaded files.
    metrics:
        Optional :class:`MetricsHook`.
    """

    def __init__(
        self,
        transport: ProntoTransport,
        registry: MimeRegistry,
        metrics: Any | None = None,
    ) -> None:
        self._transport = transport
        self._registry = registry
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    def upload(
        self,
        source: Any,
        *,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> APIResponse[FileMetadata]:
        """Upload a file.

        Parameters
        ----------
        source:
            A :class:`FileHandle`, raw bytes, a local path (``str`` or
            ``os.PathLike``), a ``data:`` URL, or an ``http(s)`` URL.
        filename:
            Override the stored file name.
        mime_type:
            Override the MIME type (ignored for data URLs, which carry
            their own).

        Returns
        -------
        APIResponse[FileMetadata]
            The stored file's metadata.
        """
        options = UploadOptions(filename=filename, mime_type=mime_type)
        try:
            payload, source_type = normalize_upload(
                source, options, self._registry, self._transport,
            )
            files, data = _upload_form(payload, source_type, options)
            response = self._transport.post("/upload", files=files, data=data)
        except GetProntoError as exc:
            _log_upload_failure(self._metrics, exc)
            raise
        _log_upload(self._metrics, payload, source_type)
        return _typed(response, FileMetadata.from_dict)

    def list(
        self,
        page: int | None = None,
        page_size: int | None = None,
    ) -> APIResponse[PaginatedFiles]:
        """List stored files.

        Parameters
        ----------
        page:
            1-based page number.  Omitted from the query when ``None``.
        page_size:
            Items per page.  Omitted from the query when ``None``.
        """
        response = self._transport.get("/files", params=_list_params(page, page_size))
        return _typed(response, PaginatedFiles.from_dict)

    def get(self, file_id: str) -> APIResponse[FileMetadata]:
        """Retrieve one file's metadata."""
        response = self._transport.get(f"/files/{file_id}")
        return _typed(response, FileMetadata.from_dict)

    def delete(self, file_id: str) -> APIResponse[None]:
        """Delete a file."""
        return self._transport.delete(f"/files/{file_id}")


class AsyncFileAPI(_RegistryMixin):
    """Asynchronous wrapper for the Get Pronto file endpoints.

    Mirrors :class:`FileAPI` but all request methods are coroutines.
    """

    def __init__(
        self,
        transport: AsyncProntoTransport,
        registry: MimeRegistry,
        metrics: Any | None = None,
    ) -> None:
        self._transport = transport
        self._registry = registry
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    async def upload(
        self,
        source: Any,
        *,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> APIResponse[FileMetadata]:
        """Upload a file (async).

        See :meth:`FileAPI.upload` for parameter documentation.
        """
        options = UploadOptions(filename=filename, mime_type=mime_type)
        try:
            payload, source_type = await async_normalize_upload(
                source, options, self._registry, self._transport,
            )
            files, data = _upload_form(payload, source_type, options)
            response = await self._transport.post("/upload", files=files, data=data)
        except GetProntoError as exc:
            _log_upload_failure(self._metrics, exc)
            raise
        _log_upload(self._metrics, payload, source_type)
        return _typed(response, FileMetadata.from_dict)

    async def list(
        self,
        page: int | None = None,
        page_size: int | None = None,
    ) -> APIResponse[PaginatedFiles]:
        """List stored files (async)."""
        response = await self._transport.get(
            "/files", params=_list_params(page, page_size)
        )
        return _typed(response, PaginatedFiles.from_dict)

    async def get(self, file_id: str) -> APIResponse[FileMetadata]:
        """Retrieve one file's metadata (async)."""
        response = await self._transport.get(f"/files/{file_id}")
        return _typed(response, FileMetadata.from_dict)

    async def delete(self, file_id: str) -> APIResponse[None]:
        """Delete a file (async)."""
        return await self._transport.delete(f"/files/{file_id}")
