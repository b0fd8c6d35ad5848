"""Credential / payload redaction for safe logging.

Apply :func:`redact` to any request or response structure before it is
written to logs or debug dumps.  Rules:

* **Authorization values** (``ApiKey <key>`` or ``Bearer <token>``) are
  masked, showing at most the last four characters of a known key.
* **Base64 data URLs** become ``<data_url:N_bytes>``.
* **Bytes values** and long non-printable strings become
  ``<binary:N_bytes>``.
* The full API key never appears in the output.
"""

from __future__ import annotations

import base64
import binascii
import copy
import re
from typing import Any

_DATA_URL_RE = re.compile(
    r"data:[a-zA-Z0-9_.+-]+/[a-zA-Z0-9_.+-]+;base64,[A-Za-z0-9+/=]+"
)

_AUTH_SCHEME_RE = re.compile(r"\b(ApiKey|Bearer)(\s+)\S+", re.IGNORECASE)

# A key containing any of these substrings (case-insensitive) is redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "api_key",
    "apikey",
    "api-key",
})

_BINARY_LENGTH_THRESHOLD = 256


def _mask_key(value: str, api_key: str | None) -> str:
    """Replace the API key and any ``ApiKey``/``Bearer`` credential."""
    if api_key and api_key in value:
        suffix = api_key[-4:] if len(api_key) >= 8 else "****"
        value = value.replace(api_key, f"<redacted:...{suffix}>")
    return _AUTH_SCHEME_RE.sub(
        lambda m: f"{m.group(1)}{m.group(2)}<redacted>"
        if not m.group(0).endswith(">")
        else m.group(0),
        value,
    )


def _estimate_data_url_bytes(url: str) -> int:
    b64_part = url.split(";base64,", 1)[-1]
    try:
        return len(base64.b64decode(b64_part, validate=True))
    except (binascii.Error, ValueError):
        return len(b64_part) * 3 // 4


def _looks_binary(value: str) -> bool:
    if len(value) < _BINARY_LENGTH_THRESHOLD:
        return False
    sample = value[:512]
    non_printable = sum(
        1 for ch in sample if not ch.isprintable() and ch not in ("\n", "\r", "\t")
    )
    return non_printable > len(sample) * 0.1


def _redact_value(value: Any, api_key: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, api_key)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, api_key) for item in value]
    if isinstance(value, str):
        if _DATA_URL_RE.search(value):
            value = _DATA_URL_RE.sub(
                lambda m: f"<data_url:{_estimate_data_url_bytes(m.group(0))}_bytes>",
                value,
            )
        if _looks_binary(value):
            return f"<binary:{len(value.encode('utf-8'))}_bytes>"
        return _mask_key(value, api_key)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<binary:{len(value)}_bytes>"
    return value


def _redact_dict(d: dict, api_key: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            if isinstance(value, str):
                masked = _mask_key(value, api_key)
                result[key] = masked if masked != value else "<redacted>"
            else:
                result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, api_key)
    return result


def redact(payload: dict, api_key: str | None = None) -> dict:
    """Return a deep copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        Headers, a request body, or a whole debug dump.
    api_key:
        The client's API key.  Any occurrence of it is scrubbed.

    Examples
    --------
    >>> redact({"Authorization": "ApiKey pk_live_abc123"})
    {'Authorization': 'ApiKey <redacted>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, api_key)
