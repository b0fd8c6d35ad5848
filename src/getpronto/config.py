"""SDK configuration for getpronto.

:class:`GetProntoConfig` is a dataclass that captures every tuneable knob
exposed by the SDK.  Instances are passed to both :class:`GetProntoClient`
and :class:`AsyncGetProntoClient`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from getpronto.mime import DEFAULT_ALLOWED_FILE_TYPES

DEFAULT_BASE_URL = "https://api.getpronto.io/v1"


def _default_file_types() -> dict[str, list[str]]:
    return {mime: list(exts) for mime, exts in DEFAULT_ALLOWED_FILE_TYPES.items()}


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class GetProntoConfig:
    """Complete configuration for a getpronto client.

    Every parameter has a sensible default so that the only *required*
    value is ``api_key``.

    Parameters
    ----------
    api_key:
        Get Pronto API key.  **Required.**  Sent as
        ``Authorization: ApiKey <key>``; never logged.
    base_url:
        API root URL.  Override for proxy or testing environments.
    headers:
        Extra headers merged into every API request.  They may override
        the defaults (including ``Content-Type``).
    timeout_seconds:
        HTTP request timeout in seconds, handed to ``httpx``.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    allowed_file_types:
        ``{mime_type: [".ext", ...]}`` table used for MIME inference and
        validation.  Defaults to :data:`DEFAULT_ALLOWED_FILE_TYPES`.
    metrics:
        Optional :class:`MetricsHook` implementation.
    debug_dump_payload:
        Write a redacted request/response dump to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    api_key: str = ""

    base_url: str = DEFAULT_BASE_URL

    headers: dict[str, str] = field(default_factory=dict)

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Uploads ─────────────────────────────────────────────────────────
    allowed_file_types: dict[str, list[str]] = field(
        default_factory=_default_file_types,
    )

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        self.base_url = self.base_url.rstrip("/")
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API key, or target localhost for testing."
            )

        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        for mime_type, extensions in self.allowed_file_types.items():
            if not extensions:
                raise ValueError(f"allowed_file_types[{mime_type!r}] must not be empty")

    def __repr__(self) -> str:
        """Mask the API key to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "api_key":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"api_key='{masked}'")
            elif f.name == "allowed_file_types":
                parts.append(f"allowed_file_types=<{len(val)} types>")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"GetProntoConfig({', '.join(parts)})"
