"""Tests for the MIME/extension registry."""

from __future__ import annotations

import pytest

from getpronto.mime import (
    DEFAULT_ALLOWED_FILE_TYPES,
    OCTET_STREAM,
    MimeRegistry,
)


class TestRegistryConstruction:
    def test_default_table_used_when_none(self):
        reg = MimeRegistry()
        assert len(reg) == len(DEFAULT_ALLOWED_FILE_TYPES)

    def test_custom_table(self):
        reg = MimeRegistry({"image/png": [".png"]})
        assert reg.allowed_mime_types() == frozenset({"image/png"})

    def test_empty_extension_list_rejected(self):
        with pytest.raises(ValueError, match="no extensions"):
            MimeRegistry({"image/png": []})

    def test_extension_without_dot_rejected(self):
        with pytest.raises(ValueError, match="must start with"):
            MimeRegistry({"image/png": ["png"]})

    def test_table_is_copied(self):
        table = {"image/png": [".png"]}
        reg = MimeRegistry(table)
        table["image/gif"] = [".gif"]
        table["image/png"].append(".apng")
        assert not reg.is_allowed("image/gif")
        assert ".apng" not in reg.allowed_extensions()

    def test_repr(self):
        assert repr(MimeRegistry({"a/b": [".b"]})) == "MimeRegistry(1 types)"


class TestAllowedSets:
    def test_allowed_mime_types(self, registry):
        assert "image/png" in registry.allowed_mime_types()
        assert "text/plain" in registry.allowed_mime_types()

    def test_allowed_extensions_flattened(self, registry):
        exts = registry.allowed_extensions()
        assert {".jpg", ".jpeg", ".png", ".txt"} <= exts
        assert all(ext.startswith(".") for ext in exts)

    def test_is_allowed(self, registry):
        assert registry.is_allowed("application/pdf")
        assert not registry.is_allowed("application/x-unknown")

    def test_contains(self, registry):
        assert "image/webp" in registry
        assert "nope/nope" not in registry

    def test_extensions_for(self, registry):
        assert registry.extensions_for("image/jpeg")[0] == ".jpg"
        assert registry.extensions_for("nope/nope") == ()


class TestMimeTypeFromFilename:
    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.jpg", "image/jpeg"),
            ("photo.JPEG", "image/jpeg"),
            ("archive.tar.gz", "application/gzip"),
            ("notes.txt", "text/plain"),
            ("report.pdf", "application/pdf"),
            ("movie.MP4", "video/mp4"),
        ],
    )
    def test_known_extensions(self, registry, filename, expected):
        assert registry.mime_type_from_filename(filename) == expected

    def test_no_extension(self, registry):
        assert registry.mime_type_from_filename("README") == OCTET_STREAM

    def test_unknown_extension(self, registry):
        assert registry.mime_type_from_filename("data.xyz") == OCTET_STREAM

    def test_empty_filename(self, registry):
        assert registry.mime_type_from_filename("") == OCTET_STREAM

    def test_trailing_dot(self, registry):
        assert registry.mime_type_from_filename("file.") == OCTET_STREAM

    def test_first_matching_mime_wins(self):
        reg = MimeRegistry({"a/one": [".x"], "a/two": [".x", ".y"]})
        assert reg.mime_type_from_filename("f.x") == "a/one"
        assert reg.mime_type_from_filename("f.y") == "a/two"

    def test_registry_extension_case_insensitive(self):
        reg = MimeRegistry({"image/png": [".PNG"]})
        assert reg.mime_type_from_filename("a.png") == "image/png"

    def test_dotfile_uses_whole_name_as_extension(self, registry):
        assert registry.mime_type_from_filename(".png") == "image/png"


class TestExtensionFromMimeType:
    def test_first_extension_without_dot(self, registry):
        assert registry.extension_from_mime_type("image/jpeg") == "jpg"
        assert registry.extension_from_mime_type("text/plain") == "txt"

    def test_unknown_mime_defaults_to_bin(self, registry):
        assert registry.extension_from_mime_type("application/x-unknown") == "bin"


class TestDefaultTable:
    def test_every_mime_has_extensions(self):
        for mime_type, exts in DEFAULT_ALLOWED_FILE_TYPES.items():
            assert exts, mime_type

    def test_first_extension_round_trips(self, registry):
        for mime_type, exts in DEFAULT_ALLOWED_FILE_TYPES.items():
            assert registry.mime_type_from_filename("x" + exts[0]) == mime_type
