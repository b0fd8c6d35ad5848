"""Tests for async upload normalization (local reads and remote downloads)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from getpronto.errors import (
    GetProntoEnvironmentError,
    GetProntoFileReadError,
    GetProntoInvalidDataUrlError,
    GetProntoRemoteFetchError,
    GetProntoUnsupportedInputError,
)
from getpronto.models import FileHandle, UploadOptions, UploadSourceType
from getpronto.upload import async_normalize_upload
from getpronto.upload import normalize as normalize_module


def make_response(status_code=200, content=b"", headers=None):
    resp = httpx.Response(status_code, content=content, headers=headers or {})
    resp.request = httpx.Request("GET", "https://cdn.example.com/file")
    return resp


def make_async_transport(response=None, exc=None):
    t = MagicMock()
    t.fetch = AsyncMock(return_value=response, side_effect=exc)
    return t


class TestAsyncLocalPath:
    @pytest.mark.asyncio
    async def test_reads_file_in_executor(self, registry, tmp_path):
        f = tmp_path / "scan.pdf"
        f.write_bytes(b"%PDF-1.7")
        payload, source_type = await async_normalize_upload(str(f), None, registry, None)
        assert source_type == UploadSourceType.LOCAL_PATH
        assert payload.content == b"%PDF-1.7"
        assert payload.name == "scan.pdf"
        assert payload.mime_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_overrides(self, registry, tmp_path):
        f = tmp_path / "scan.pdf"
        f.write_bytes(b"x")
        opts = UploadOptions(filename="final.pdf", mime_type="application/x-pdf")
        payload, _ = await async_normalize_upload(f, opts, registry, None)
        assert payload.name == "final.pdf"
        assert payload.mime_type == "application/x-pdf"

    @pytest.mark.asyncio
    async def test_missing_file(self, registry, tmp_path):
        with pytest.raises(GetProntoFileReadError) as exc_info:
            await async_normalize_upload(str(tmp_path / "gone.txt"), None, registry, None)
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_no_filesystem(self, registry, monkeypatch):
        monkeypatch.setattr(normalize_module, "_has_local_filesystem", lambda: False)
        with pytest.raises(GetProntoEnvironmentError) as exc_info:
            await async_normalize_upload("/tmp/a.png", None, registry, None)
        assert exc_info.value.context["path"] == "/tmp/a.png"


class TestAsyncRemoteUrl:
    @pytest.mark.asyncio
    async def test_download(self, registry):
        resp = make_response(
            content=b"gifdata",
            headers={
                "content-type": "image/gif",
                "content-disposition": 'inline; filename="party.gif"',
            },
        )
        t = make_async_transport(resp)
        payload, source_type = await async_normalize_upload(
            "https://example.com/x", None, registry, t,
        )
        t.fetch.assert_awaited_once_with("https://example.com/x")
        assert source_type == UploadSourceType.REMOTE_URL
        assert payload.content == b"gifdata"
        assert payload.name == "party.gif"
        assert payload.mime_type == "image/gif"

    @pytest.mark.asyncio
    async def test_server_error(self, registry):
        t = make_async_transport(make_response(status_code=503))
        with pytest.raises(GetProntoRemoteFetchError) as exc_info:
            await async_normalize_upload("https://example.com/a.png", None, registry, t)
        assert exc_info.value.context["status_code"] == 503

    @pytest.mark.asyncio
    async def test_transport_failure(self, registry):
        t = make_async_transport(exc=httpx.ReadTimeout("slow"))
        with pytest.raises(GetProntoRemoteFetchError) as exc_info:
            await async_normalize_upload("https://example.com/a.png", None, registry, t)
        assert isinstance(exc_info.value.cause, httpx.ReadTimeout)


class TestAsyncInMemorySources:
    @pytest.mark.asyncio
    async def test_file_handle_identity(self, registry):
        handle = FileHandle(content=b"x", name="a.png", mime_type="image/png")
        payload, _ = await async_normalize_upload(handle, None, registry, None)
        assert payload is handle

    @pytest.mark.asyncio
    async def test_bytes(self, registry):
        payload, _ = await async_normalize_upload(
            b"abc", UploadOptions(filename="abc.csv"), registry, None,
        )
        assert payload.mime_type == "text/csv"

    @pytest.mark.asyncio
    async def test_data_url(self, registry):
        payload, _ = await async_normalize_upload(
            "data:text/plain;base64,SGVsbG8gV29ybGQ=", None, registry, None,
        )
        assert payload.content == b"Hello World"
        assert payload.name == "file.txt"

    @pytest.mark.asyncio
    async def test_invalid_data_url(self, registry):
        with pytest.raises(GetProntoInvalidDataUrlError):
            await async_normalize_upload("data:nonsense", None, registry, None)

    @pytest.mark.asyncio
    async def test_unsupported(self, registry):
        with pytest.raises(GetProntoUnsupportedInputError):
            await async_normalize_upload(object(), None, registry, None)
