"""MIME type / file extension registry.

:data:`DEFAULT_ALLOWED_FILE_TYPES` maps every MIME type the Get Pronto API
accepts to its ordered list of file extensions.  The first extension is
the canonical one (used when a filename has to be synthesised).

:class:`MimeRegistry` wraps a table of this shape and answers lookups in
both directions.  A registry is built once per client from
:attr:`GetProntoConfig.allowed_file_types` and is read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

OCTET_STREAM = "application/octet-stream"
"""Generic binary MIME type, used whenever nothing better can be inferred."""

DEFAULT_EXTENSION = "bin"

DEFAULT_ALLOWED_FILE_TYPES: dict[str, list[str]] = {
    # Images
    "image/jpeg": [".jpg", ".jpeg", ".jpe"],
    "image/png": [".png"],
    "image/gif": [".gif"],
    "image/webp": [".webp"],
    "image/svg+xml": [".svg"],
    "image/avif": [".avif"],
    "image/bmp": [".bmp"],
    "image/tiff": [".tiff", ".tif"],
    "image/x-icon": [".ico"],
    "image/heic": [".heic"],
    # Documents
    "application/pdf": [".pdf"],
    "text/plain": [".txt", ".text", ".log"],
    "text/csv": [".csv"],
    "text/markdown": [".md", ".markdown"],
    "text/html": [".html", ".htm"],
    "text/css": [".css"],
    "text/javascript": [".js", ".mjs"],
    "application/json": [".json"],
    "application/xml": [".xml"],
    "application/msword": [".doc"],
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": [".docx"],
    "application/vnd.ms-excel": [".xls"],
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": [".xlsx"],
    "application/vnd.ms-powerpoint": [".ppt"],
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": [".pptx"],
    # Archives
    "application/zip": [".zip"],
    "application/gzip": [".gz", ".tgz"],
    "application/x-tar": [".tar"],
    # Audio / video
    "audio/mpeg": [".mp3"],
    "audio/wav": [".wav"],
    "audio/ogg": [".ogg", ".oga"],
    "video/mp4": [".mp4", ".m4v"],
    "video/webm": [".webm"],
    "video/quicktime": [".mov"],
}


class MimeRegistry:
    """Bidirectional lookup over a ``{mime_type: [".ext", ...]}`` table.

    Parameters
    ----------
    table:
        Mapping of MIME type to its extensions.  Every extension must start
        with ``"."`` and every MIME type must have at least one extension.
        The table is copied, so later changes to *table* have no effect.

    Raises
    ------
    ValueError
        If the table violates the invariants above.
    """

    __slots__ = ("_table", "_mime_types", "_extensions")

    def __init__(self, table: Mapping[str, Sequence[str]] | None = None) -> None:
        source = DEFAULT_ALLOWED_FILE_TYPES if table is None else table
        copied: dict[str, tuple[str, ...]] = {}
        for mime_type, extensions in source.items():
            if not extensions:
                raise ValueError(f"MIME type {mime_type!r} has no extensions")
            for ext in extensions:
                if not ext.startswith("."):
                    raise ValueError(
                        f"Extension {ext!r} for {mime_type!r} must start with '.'"
                    )
            copied[mime_type] = tuple(extensions)
        self._table = copied
        self._mime_types = frozenset(copied)
        self._extensions = frozenset(
            ext for extensions in copied.values() for ext in extensions
        )

    def allowed_mime_types(self) -> frozenset[str]:
        """Return every MIME type in the registry."""
        return self._mime_types

    def allowed_extensions(self) -> frozenset[str]:
        """Return the union of all registered extensions (with the dot)."""
        return self._extensions

    def is_allowed(self, mime_type: str) -> bool:
        return mime_type in self._mime_types

    def extensions_for(self, mime_type: str) -> tuple[str, ...]:
        return self._table.get(mime_type, ())

    def mime_type_from_filename(self, filename: str) -> str:
        """Infer a MIME type from the extension of *filename*.

        Everything from the last ``.`` onwards is compared
        case-insensitively against the registry in table order; the first
        MIME type listing that extension wins.  Never raises.

        Returns
        -------
        str
            The matching MIME type, or ``application/octet-stream`` if the
            filename has no extension or the extension is unknown.
        """
        dot = filename.rfind(".")
        if dot == -1:
            return OCTET_STREAM
        extension = filename[dot:].lower()
        for mime_type, extensions in self._table.items():
            if any(ext.lower() == extension for ext in extensions):
                return mime_type
        return OCTET_STREAM

    def extension_from_mime_type(self, mime_type: str) -> str:
        """Return the canonical extension for *mime_type* without its dot.

        Falls back to ``"bin"`` for unregistered MIME types.
        """
        extensions = self._table.get(mime_type)
        if not extensions:
            return DEFAULT_EXTENSION
        return extensions[0][1:]

    def __contains__(self, mime_type: object) -> bool:
        return mime_type in self._mime_types

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"MimeRegistry({len(self._table)} types)"
