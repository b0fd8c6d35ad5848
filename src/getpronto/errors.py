"""Full error hierarchy for the getpronto SDK.

Every public error class inherits from GetProntoError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and can be matched with simple ``==`` comparisons.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the SDK can raise."""

    UNSUPPORTED_INPUT = "UNSUPPORTED_INPUT"
    INVALID_DATA_URL = "INVALID_DATA_URL"
    ENVIRONMENT_ERROR = "ENVIRONMENT_ERROR"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    REMOTE_FETCH_ERROR = "REMOTE_FETCH_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TRANSFORM_FETCH_ERROR = "TRANSFORM_FETCH_ERROR"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class GetProntoError(Exception):
    """Base exception for all getpronto errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Upload input errors
# ---------------------------------------------------------------------------

class GetProntoUploadInputError(GetProntoError):
    """Base class for errors raised while normalizing an upload source.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.UNSUPPORTED_INPUT,
        message: str = "Invalid upload input",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class GetProntoUnsupportedInputError(GetProntoUploadInputError):
    """The upload source is not a file handle, byte buffer, path, data URL
    or remote URL.

    Context keys: ``input_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_INPUT,
            message=message,
            context=context,
            cause=cause,
        )


class GetProntoInvalidDataUrlError(GetProntoUploadInputError):
    """A ``data:`` URL is malformed or its base64 payload cannot be decoded.

    Context keys: ``src``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATA_URL,
            message=message,
            context=context,
            cause=cause,
        )


class GetProntoEnvironmentError(GetProntoUploadInputError):
    """A local path upload was attempted on a runtime without filesystem
    access (e.g. Pyodide in a browser).

    Context keys: ``path``, ``platform``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.ENVIRONMENT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class GetProntoFileReadError(GetProntoUploadInputError):
    """A local file could not be read.  The originating :class:`OSError`
    is available as ``cause``.

    Context keys: ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.FILE_READ_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class GetProntoRemoteFetchError(GetProntoUploadInputError):
    """Downloading a remote upload source failed.

    Context keys: ``url``, ``status_code``, ``status_text``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.REMOTE_FETCH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Image transform errors
# ---------------------------------------------------------------------------

class GetProntoValidationError(GetProntoError):
    """A transform builder argument is outside its allowed range or format.

    Context keys: ``field``, ``value``, ``constraint``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class GetProntoTransformFetchError(GetProntoError):
    """The transformed image URL was generated but fetching it failed.

    Context keys: ``url``, ``status_code``, ``status_text``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TRANSFORM_FETCH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class GetProntoAPIError(GetProntoError):
    """The Get Pronto API answered with a non-2xx status.

    Attributes
    ----------
    status:
        HTTP status code (``0`` for transport failures).
    status_text:
        HTTP reason phrase.
    headers:
        Response headers as a plain dict.
    body:
        Parsed JSON response body, or ``None`` if it was not JSON.
    """

    def __init__(
        self,
        message: str,
        status: int,
        status_text: str = "",
        headers: dict[str, str] | None = None,
        body: Any = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        code: str = ErrorCode.API_ERROR,
    ) -> None:
        self.status: int = status
        self.status_text: str = status_text
        self.headers: dict[str, str] = headers or {}
        self.body: Any = body
        ctx = {"status_code": status, "status_text": status_text}
        ctx.update(context or {})
        super().__init__(
            code=code,
            message=message,
            context=ctx,
            cause=cause,
        )


class GetProntoNetworkError(GetProntoAPIError):
    """A transport-level failure occurred (timeout, DNS, connection refused).

    Always carries ``status == 0`` and ``status_text == "NetworkError"``.

    Context keys: ``method``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status=0,
            status_text="NetworkError",
            context=context,
            cause=cause,
            code=ErrorCode.NETWORK_ERROR,
        )
