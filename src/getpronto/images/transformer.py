"""Fluent image transformation builder.

Setters validate their arguments immediately and return the builder, so
calls can be chained::

    url = (
        client.images.transform("file-id")
        .resize(800, 600, fit="contain")
        .quality(85)
        .grayscale()
        .to_url()
    )

The accumulated :class:`TransformOptions` are only sent to the server by
the terminal operations :meth:`ImageTransformer.to_url` and
:meth:`ImageTransformer.transform` (or their async twins).  The builder
stays usable after a terminal call; later setters simply extend the
accumulated state.
"""

from __future__ import annotations

import math
import re
from dataclasses import replace
from numbers import Real
from typing import Any

import httpx

from getpronto.errors import (
    GetProntoAPIError,
    GetProntoTransformFetchError,
    GetProntoValidationError,
)
from getpronto.models import ImageFit, ImageFormat, TransformOptions
from getpronto.observability import NoopMetricsHook, get_logger

log = get_logger("getpronto.images")

MAX_DIMENSION = 5000
MIN_BLUR = 0.3
MAX_BLUR = 1000
MAX_ROTATION = 360

_HEX_COLOR_RE = re.compile(r"[0-9A-F]{6}", re.IGNORECASE)


def _invalid(field: str, value: Any, constraint: str, message: str) -> GetProntoValidationError:
    return GetProntoValidationError(
        message=message,
        context={"field": field, "value": value, "constraint": constraint},
    )


def _require_number(field: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise _invalid(field, value, "number", f"{field} must be a number")
    if not math.isfinite(value):
        raise _invalid(field, value, "finite number", f"{field} must be a finite number")


def _wire_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _require_range(
    field: str,
    value: Any,
    low: float,
    high: float,
    message: str,
) -> None:
    _require_number(field, value)
    if value < low or value > high:
        raise _invalid(field, value, f"{low}..{high}", message)


def _coerce_enum(field: str, value: Any, enum_cls: type) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise _invalid(
            field, value, allowed, f"{field} must be one of: {allowed}"
        ) from None


class _TransformBuilder:
    """Validating accumulator shared by the sync and async transformers."""

    def __init__(self, file_id: str, transport: Any, metrics: Any | None = None) -> None:
        self._file_id = file_id
        self._transport = transport
        self._options = TransformOptions()
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    @property
    def file_id(self) -> str:
        return self._file_id

    @property
    def options(self) -> TransformOptions:
        """A copy of the options accumulated so far."""
        return replace(self._options)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(file_id={self._file_id!r}, "
            f"options={self._options.to_dict()!r})"
        )

    # -- setters -----------------------------------------------------------

    def resize(
        self,
        width: int | None = None,
        height: int | None = None,
        fit: ImageFit | str = ImageFit.COVER,
    ):
        """Set the target width and/or height.

        Parameters
        ----------
        width, height:
            Target dimensions in pixels (1-5000).  Either may be omitted.
        fit:
            How the image fits the box.  Only recorded when at least one
            dimension is given.
        """
        fit_value = _coerce_enum("fit", fit, ImageFit)
        if width is not None:
            _require_range(
                "width", width, 1, MAX_DIMENSION,
                f"Width must be between 1 and {MAX_DIMENSION} pixels",
            )
        if height is not None:
            _require_range(
                "height", height, 1, MAX_DIMENSION,
                f"Height must be between 1 and {MAX_DIMENSION} pixels",
            )

        if width is not None:
            self._options.w = width
        if height is not None:
            self._options.h = height
        if width is not None or height is not None:
            self._options.fit = fit_value
        return self

    def quality(self, value: int):
        """Set the output quality (1-100)."""
        _require_range("quality", value, 1, 100, "Quality must be between 1 and 100")
        self._options.q = value
        return self

    def blur(self, value: float):
        """Apply a Gaussian blur with radius *value* (0.3-1000)."""
        _require_range(
            "blur", value, MIN_BLUR, MAX_BLUR,
            f"Blur value must be between {MIN_BLUR} and {MAX_BLUR}",
        )
        self._options.blur = value
        return self

    def sharpen(self):
        self._options.sharp = True
        return self

    def grayscale(self):
        self._options.gray = True
        return self

    def rotate(self, degrees: float):
        """Rotate by *degrees* (-360 to 360)."""
        _require_range(
            "rotate", degrees, -MAX_ROTATION, MAX_ROTATION,
            f"Rotation must be between -{MAX_ROTATION} and {MAX_ROTATION} degrees",
        )
        self._options.rot = degrees
        return self

    def border(self, width: int, color: str):
        """Add a border.

        Parameters
        ----------
        width:
            Border width in pixels (>= 1).
        color:
            Six-digit hex colour, with or without a leading ``#``.  Stored
            as given (case is preserved).
        """
        _require_number("border_width", width)
        if width < 1:
            raise _invalid("border_width", width, ">=1", "Border width must be positive")
        hex_color = color.replace("#", "", 1) if isinstance(color, str) else color
        if not isinstance(hex_color, str) or not _HEX_COLOR_RE.fullmatch(hex_color):
            raise _invalid(
                "border_color", color, "RRGGBB",
                "Invalid color format. Use 6-digit hex color (e.g., FF0000 for red)",
            )
        self._options.border = f"{_wire_number(width)}_{hex_color}"
        return self

    def crop(self, x: int, y: int, width: int, height: int):
        """Crop a *width* x *height* region starting at (*x*, *y*)."""
        _require_number("crop_x", x)
        _require_number("crop_y", y)
        _require_number("crop_width", width)
        _require_number("crop_height", height)
        if width < 1 or height < 1:
            raise _invalid(
                "crop", (x, y, width, height), "width>=1,height>=1",
                "Crop dimensions must be positive",
            )
        self._options.crop = ",".join(
            str(_wire_number(part)) for part in (x, y, width, height)
        )
        return self

    def format(self, type: ImageFormat | str):  # noqa: A002 - mirrors the API field
        """Set the output format (``jpeg``, ``jpg``, ``png``, ``webp``, ``avif``)."""
        self._options.format = _coerce_enum("format", type, ImageFormat)
        return self

    # -- terminal helpers ---------------------------------------------------

    @property
    def _transform_url_path(self) -> str:
        return f"/image/{self._file_id}/transform-url"

    def _url_from_response(self, response: Any) -> str:
        data = response.data
        url = data.get("url") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise GetProntoAPIError(
                message="Transform response did not include a URL",
                status=response.status,
                headers=response.headers,
                body=data,
                context={"file_id": self._file_id},
            )
        self._metrics.increment("getpronto.transform_url_total")
        log.debug(
            "Transform URL generated",
            extra={
                "extra_fields": {
                    "op": "to_url",
                    "file_id": self._file_id,
                    "options": self._options.to_dict(),
                }
            },
        )
        return url

    def _image_from_response(self, url: str, response: httpx.Response) -> bytes:
        if not response.is_success:
            raise GetProntoTransformFetchError(
                message=(
                    f"Image transformation failed: {response.status_code} "
                    f"{response.reason_phrase}"
                ),
                context={
                    "url": url,
                    "status_code": response.status_code,
                    "status_text": response.reason_phrase,
                },
            )
        return response.content

    def _fetch_failed(self, url: str, exc: httpx.TransportError) -> GetProntoTransformFetchError:
        return GetProntoTransformFetchError(
            message=f"Image transformation failed: {exc}",
            context={"url": url},
            cause=exc,
        )


_IMAGE_ACCEPT = {"Accept": "image/*"}


class ImageTransformer(_TransformBuilder):
    """Synchronous transform builder bound to one file.

    Parameters
    ----------
    file_id:
        Id of the image to transform.
    transport:
        A :class:`ProntoTransport` (or compatible object).
    metrics:
        Optional :class:`MetricsHook`; defaults to a no-op.
    """

    def to_url(self) -> str:
        """Ask the API for a URL that renders the accumulated transform.

        Raises
        ------
        GetProntoAPIError
            If the API rejects the request or returns no URL.
        """
        response = self._transport.post(self._transform_url_path, self._options.to_dict())
        return self._url_from_response(response)

    def transform(self) -> bytes:
        """Render the transform and return the image bytes.

        Raises
        ------
        GetProntoAPIError
            If generating the URL fails.
        GetProntoTransformFetchError
            If downloading the rendered image fails.
        """
        url = self.to_url()
        try:
            response = self._transport.fetch(url, headers=dict(_IMAGE_ACCEPT))
        except httpx.TransportError as exc:
            raise self._fetch_failed(url, exc) from exc
        return self._image_from_response(url, response)


class AsyncImageTransformer(_TransformBuilder):
    """Asynchronous transform builder bound to one file.

    Setters are the same as :class:`ImageTransformer`; the terminal
    operations are coroutines.
    """

    async def to_url(self) -> str:
        """Async equivalent of :meth:`ImageTransformer.to_url`."""
        response = await self._transport.post(
            self._transform_url_path, self._options.to_dict()
        )
        return self._url_from_response(response)

    async def transform(self) -> bytes:
        """Async equivalent of :meth:`ImageTransformer.transform`."""
        url = await self.to_url()
        try:
            response = await self._transport.fetch(url, headers=dict(_IMAGE_ACCEPT))
        except httpx.TransportError as exc:
            raise self._fetch_failed(url, exc) from exc
        return self._image_from_response(url, response)
