"""Sync and async HTTP transports for the Get Pronto API.

Each transport handles the request lifecycle for the primary API:

1. Merge the default headers (``Authorization: ApiKey <key>``,
   ``Content-Type: application/json``, configured extras) with
   per-request headers.  Multipart requests drop ``Content-Type`` so
   ``httpx`` can set the boundary.
2. Send the request.
3. On ``2xx`` -- return an :class:`APIResponse` with the parsed JSON body
   (``None`` when the body is empty or not JSON).
4. On any other status -- raise :class:`GetProntoAPIError`.
5. On a transport failure -- raise :class:`GetProntoNetworkError`.

Nothing is retried.  Each transport also owns a second, unauthenticated
client used by :meth:`fetch` for third-party URLs (remote upload sources
and rendered transform URLs) so the API key never leaves the API host.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from getpronto.config import GetProntoConfig
from getpronto.errors import GetProntoAPIError, GetProntoNetworkError
from getpronto.models import APIResponse
from getpronto.observability import NoopMetricsHook, get_logger

log = get_logger("getpronto.transport")

_UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_body(response: httpx.Response) -> Any:
    """Parse a JSON body, degrading to ``None`` for empty or non-JSON bodies."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(body: Any) -> str:
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return _UNKNOWN_ERROR_MESSAGE


def _build_headers(
    config: GetProntoConfig,
    extra: dict[str, str] | None,
    multipart: bool,
) -> dict[str, str]:
    """Merge default, configured and per-request headers."""
    headers: dict[str, str] = {
        "Authorization": f"ApiKey {config.api_key}",
        "Content-Type": "application/json",
    }
    headers.update(config.headers)
    if extra:
        headers.update(extra)
    if multipart:
        headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
    return headers


def _dump_payload(
    method: str,
    url: str,
    payload: Any,
    response_status: int | None,
    response_body: Any | None,
    api_key: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from getpronto.utils.redact import redact

    dump: dict[str, Any] = {
        "method": method,
        "url": url,
    }
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    safe_dump = redact(dump, api_key)
    print(
        _json.dumps(safe_dump, indent=2, default=str),
        file=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Shared request helpers (used by both sync and async transports)
# ---------------------------------------------------------------------------

def _handle_network_exception(
    metrics: Any,
    method: str,
    path: str,
    exc: Exception,
) -> GetProntoNetworkError:
    """Record a transport failure and build the error to raise."""
    metrics.increment(
        "getpronto.requests_total",
        tags={"method": method, "path": path, "status": "error"},
    )
    log.warning(
        "Request network error",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "error": str(exc),
            }
        },
    )
    return GetProntoNetworkError(
        message=str(exc) or "Network error occurred",
        context={"method": method, "path": path},
        cause=exc,
    )


def _process_response(
    config: GetProntoConfig,
    metrics: Any,
    method: str,
    path: str,
    response: httpx.Response,
    elapsed_ms: float,
    payload: Any,
) -> APIResponse[Any]:
    """Turn an ``httpx`` response into an :class:`APIResponse` or raise."""
    status = response.status_code
    tags = {"method": method, "path": path, "status": str(status)}
    metrics.increment("getpronto.requests_total", tags=tags)
    metrics.timing("getpronto.request_duration_ms", elapsed_ms, tags=tags)

    headers = dict(response.headers)
    body = _parse_body(response)

    if config.debug_dump_payload:
        _dump_payload(
            method, str(response.url), payload, status, body,
            api_key=config.api_key,
        )

    if 200 <= status < 300:
        log.debug(
            "Request complete",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "status_code": status,
                    "duration_ms": round(elapsed_ms, 2),
                }
            },
        )
        return APIResponse(data=body, status=status, headers=headers)

    message = _error_message(body)
    log.warning(
        "Request failed",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "status_code": status,
                "error": message,
            }
        },
    )
    raise GetProntoAPIError(
        message=message,
        status=status,
        status_text=response.reason_phrase,
        headers=headers,
        body=body,
        context={"method": method, "path": path},
    )


def _request_kwargs(
    config: GetProntoConfig,
    body: Any,
    params: dict[str, Any] | None,
    files: dict[str, Any] | None,
    data: dict[str, Any] | None,
    headers: dict[str, str] | None,
) -> dict[str, Any]:
    multipart = files is not None
    kwargs: dict[str, Any] = {
        "headers": _build_headers(config, headers, multipart),
    }
    if params:
        kwargs["params"] = params
    if multipart:
        kwargs["files"] = files
        if data:
            kwargs["data"] = data
    elif body is not None:
        kwargs["content"] = _json.dumps(body).encode("utf-8")
    return kwargs


def _debug_payload(body: Any, files: dict[str, Any] | None, data: Any) -> Any:
    if files is None:
        return body
    return {"files": files, "data": data}


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class ProntoTransport:
    """Synchronous HTTP transport for the Get Pronto API.

    Parameters
    ----------
    config:
        A :class:`GetProntoConfig` instance controlling transport behaviour.
    """

    def __init__(self, config: GetProntoConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        proxy: httpx.URL | str | None = config.http_proxy
        timeout = httpx.Timeout(config.timeout_seconds)
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=timeout,
            proxy=proxy,
        )
        self._fetch_client = httpx.Client(
            timeout=timeout,
            proxy=proxy,
            follow_redirects=True,
        )

    # -- public API --------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> APIResponse[Any]:
        """Execute an HTTP request against the Get Pronto API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``DELETE``).
        path:
            API path relative to ``base_url`` (e.g. ``/files``).
        body:
            JSON-serialisable request body.  Ignored when *files* is given.
        params:
            Query-string parameters.
        files:
            Multipart file fields (``httpx`` ``files=`` format).  Turns the
            request into ``multipart/form-data``.
        data:
            Extra multipart form fields, sent alongside *files*.
        headers:
            Per-request header overrides.

        Returns
        -------
        APIResponse
            Parsed body, status code and response headers.

        Raises
        ------
        GetProntoAPIError
            On any non-2xx response.
        GetProntoNetworkError
            On transport-level failures.
        """
        kwargs = _request_kwargs(self._config, body, params, files, data, headers)

        t0 = time.monotonic()
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise _handle_network_exception(self._metrics, method, path, exc) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        return _process_response(
            self._config, self._metrics, method, path, response, elapsed_ms,
            _debug_payload(body, files, data),
        )

    def get(self, path: str, **kwargs: Any) -> APIResponse[Any]:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, body: Any = None, **kwargs: Any) -> APIResponse[Any]:
        return self.request("POST", path, body=body, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> APIResponse[Any]:
        return self.request("DELETE", path, **kwargs)

    def fetch(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """GET an absolute third-party URL without API credentials.

        The response is returned whatever its status; transport failures
        propagate as ``httpx.TransportError`` for the caller to classify.
        """
        log.debug(
            "Fetching external URL",
            extra={"extra_fields": {"op": "fetch", "url": url}},
        )
        return self._fetch_client.get(url, headers=headers)

    def close(self) -> None:
        """Close the underlying HTTP clients and release resources."""
        self._client.close()
        self._fetch_client.close()

    def __enter__(self) -> ProntoTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncProntoTransport:
    """Asynchronous HTTP transport for the Get Pronto API.

    Mirrors :class:`ProntoTransport` but uses ``httpx.AsyncClient``.

    Parameters
    ----------
    config:
        A :class:`GetProntoConfig` instance controlling transport behaviour.
    """

    def __init__(self, config: GetProntoConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        proxy: httpx.URL | str | None = config.http_proxy
        timeout = httpx.Timeout(config.timeout_seconds)
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=timeout,
            proxy=proxy,
        )
        self._fetch_client = httpx.AsyncClient(
            timeout=timeout,
            proxy=proxy,
            follow_redirects=True,
        )

    # -- public API --------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> APIResponse[Any]:
        """Execute an HTTP request against the Get Pronto API (async).

        See :meth:`ProntoTransport.request` for full documentation.
        """
        kwargs = _request_kwargs(self._config, body, params, files, data, headers)

        t0 = time.monotonic()
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise _handle_network_exception(self._metrics, method, path, exc) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        return _process_response(
            self._config, self._metrics, method, path, response, elapsed_ms,
            _debug_payload(body, files, data),
        )

    async def get(self, path: str, **kwargs: Any) -> APIResponse[Any]:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, body: Any = None, **kwargs: Any) -> APIResponse[Any]:
        return await self.request("POST", path, body=body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> APIResponse[Any]:
        return await self.request("DELETE", path, **kwargs)

    async def fetch(
        self,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET an absolute third-party URL without API credentials (async)."""
        log.debug(
            "Fetching external URL",
            extra={"extra_fields": {"op": "fetch", "url": url}},
        )
        return await self._fetch_client.get(url, headers=headers)

    async def close(self) -> None:
        """Close the underlying async HTTP clients and release resources."""
        await self._client.aclose()
        await self._fetch_client.aclose()

    async def __aenter__(self) -> AsyncProntoTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
