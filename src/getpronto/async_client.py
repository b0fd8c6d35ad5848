"""Asynchronous Get Pronto SDK client.

:class:`AsyncGetProntoClient` mirrors :class:`GetProntoClient` but every
I/O method is an ``async def`` coroutine.

Usage::

    import asyncio
    from getpronto import AsyncGetProntoClient

    async def main():
        async with AsyncGetProntoClient(api_key="pk_xxx") as client:
            uploaded = await client.files.upload("https://example.com/cat.png")
            image = await (
                client.images.transform(uploaded.data.id)
                .resize(800, 600)
                .format("webp")
                .transform()
            )

    asyncio.run(main())
"""

from __future__ import annotations

from typing import Any

from getpronto.api.files import AsyncFileAPI
from getpronto.api.images import AsyncImageAPI
from getpronto.api.transport import AsyncProntoTransport
from getpronto.config import GetProntoConfig
from getpronto.mime import MimeRegistry


class AsyncGetProntoClient:
    """Asynchronous Get Pronto SDK client.

    Parameters
    ----------
    api_key:
        Get Pronto API key.  **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`GetProntoConfig`.
    """

    def __init__(self, api_key: str, **kwargs: Any) -> None:
        """Create client.  All kwargs are forwarded to GetProntoConfig."""
        self._config = GetProntoConfig(api_key=api_key, **kwargs)
        self._registry = MimeRegistry(self._config.allowed_file_types)
        self._transport = AsyncProntoTransport(self._config)
        self.files = AsyncFileAPI(self._transport, self._registry, self._config.metrics)
        self.images = AsyncImageAPI(self._transport, self._config.metrics)

    @property
    def config(self) -> GetProntoConfig:
        return self._config

    async def close(self) -> None:
        """Close the underlying async HTTP clients."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncGetProntoClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
