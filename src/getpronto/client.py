"""Synchronous Get Pronto SDK client.

Usage::

    from getpronto import GetProntoClient

    with GetProntoClient(api_key="pk_xxx") as client:
        uploaded = client.files.upload("./photo.jpg")
        url = client.images.transform(uploaded.data.id).resize(400).to_url()
"""

from __future__ import annotations

from typing import Any

from getpronto.api.files import FileAPI
from getpronto.api.images import ImageAPI
from getpronto.api.transport import ProntoTransport
from getpronto.config import GetProntoConfig
from getpronto.mime import MimeRegistry


class GetProntoClient:
    """Synchronous Get Pronto SDK client.

    Parameters
    ----------
    api_key:
        Get Pronto API key.  **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`GetProntoConfig`.

    Attributes
    ----------
    files:
        :class:`FileAPI` for uploads and file records.
    images:
        :class:`ImageAPI` for image transformations.
    """

    def __init__(self, api_key: str, **kwargs: Any) -> None:
        self._config = GetProntoConfig(api_key=api_key, **kwargs)
        self._registry = MimeRegistry(self._config.allowed_file_types)
        self._transport = ProntoTransport(self._config)
        self.files = FileAPI(self._transport, self._registry, self._config.metrics)
        self.images = ImageAPI(self._transport, self._config.metrics)

    @property
    def config(self) -> GetProntoConfig:
        return self._config

    def close(self) -> None:
        """Close the underlying HTTP clients."""
        self._transport.close()

    def __enter__(self) -> GetProntoClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
