"""Image API wrappers for the Get Pronto API.

:class:`ImageAPI` and :class:`AsyncImageAPI` hand out transform builders
bound to the client's transport.
"""

from __future__ import annotations

from typing import Any

from getpronto.images import AsyncImageTransformer, ImageTransformer

from .transport import AsyncProntoTransport, ProntoTransport


class ImageAPI:
    """Synchronous entry point for image transformations.

    Parameters
    ----------
    transport:
        A configured :class:`ProntoTransport` instance.
    metrics:
        Optional :class:`MetricsHook` passed to every builder.
    """

    def __init__(self, transport: ProntoTransport, metrics: Any | None = None) -> None:
        self._transport = transport
        self._metrics = metrics

    def transform(self, file_id: str) -> ImageTransformer:
        """Start a new transformation chain for *file_id*."""
        return ImageTransformer(file_id, self._transport, self._metrics)


class AsyncImageAPI:
    """Asynchronous entry point for image transformations.

    Builders are created synchronously; only their terminal operations
    are coroutines.
    """

    def __init__(self, transport: AsyncProntoTransport, metrics: Any | None = None) -> None:
        self._transport = transport
        self._metrics = metrics

    def transform(self, file_id: str) -> AsyncImageTransformer:
        """Start a new transformation chain for *file_id*."""
        return AsyncImageTransformer(file_id, self._transport, self._metrics)
