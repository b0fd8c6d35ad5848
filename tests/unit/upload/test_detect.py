"""Tests for upload source detection."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import pytest

from getpronto.errors import ErrorCode, GetProntoUnsupportedInputError
from getpronto.models import FileHandle, UploadSourceType
from getpronto.upload.detect import detect_upload_source


class TestDetectNonStrings:
    def test_file_handle(self):
        handle = FileHandle(content=b"x", name="a.txt", mime_type="text/plain")
        assert detect_upload_source(handle) == UploadSourceType.FILE_HANDLE

    @pytest.mark.parametrize("buf", [b"abc", bytearray(b"abc"), memoryview(b"abc"), b""])
    def test_byte_buffers(self, buf):
        assert detect_upload_source(buf) == UploadSourceType.BYTE_BUFFER

    def test_path_objects(self):
        assert detect_upload_source(Path("a/b.png")) == UploadSourceType.LOCAL_PATH
        assert detect_upload_source(PurePosixPath("b.png")) == UploadSourceType.LOCAL_PATH


class TestDetectStrings:
    def test_data_url(self):
        assert detect_upload_source("data:text/plain;base64,AA==") == UploadSourceType.DATA_URL

    def test_malformed_data_url_still_data_url(self):
        # Validation happens during normalization, not detection.
        assert detect_upload_source("data:garbage") == UploadSourceType.DATA_URL

    def test_https_url(self):
        assert detect_upload_source("https://example.com/a.png") == UploadSourceType.REMOTE_URL

    def test_http_url(self):
        assert detect_upload_source("http://example.com/a.png") == UploadSourceType.REMOTE_URL

    def test_other_schemes_are_paths(self):
        assert detect_upload_source("ftp://example.com/a.png") == UploadSourceType.LOCAL_PATH

    def test_uppercase_scheme_is_path(self):
        assert detect_upload_source("HTTPS://example.com/a.png") == UploadSourceType.LOCAL_PATH

    def test_relative_path(self):
        assert detect_upload_source("./images/photo.png") == UploadSourceType.LOCAL_PATH

    def test_windows_path(self):
        assert detect_upload_source("C:\\images\\photo.png") == UploadSourceType.LOCAL_PATH

    def test_data_prefix_checked_before_url(self):
        # A string can only start one way, but the order is data -> http -> path.
        assert detect_upload_source("data:https://x") == UploadSourceType.DATA_URL


class TestDetectUnsupported:
    @pytest.mark.parametrize("value", [None, 42, 3.5, ["a"], {"a": 1}, object()])
    def test_unsupported_values_raise(self, value):
        with pytest.raises(GetProntoUnsupportedInputError) as exc_info:
            detect_upload_source(value)
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_INPUT
        assert exc_info.value.context["input_type"] == type(value).__name__
