"""Metrics hook protocol and no-op default implementation.

getpronto emits counters and timings around API requests, uploads and
transform-URL generation.  By default a :class:`NoopMetricsHook` is used so
there is zero overhead.  Supply any object satisfying :class:`MetricsHook`
(via ``GetProntoConfig(metrics=...)``) to forward them to StatsD,
Prometheus, Datadog, etc.

Emitted metric names:

* ``getpronto.requests_total``         -- counter
* ``getpronto.request_duration_ms``    -- timing
* ``getpronto.upload_success_total``   -- counter
* ``getpronto.upload_failure_total``   -- counter
* ``getpronto.transform_url_total``    -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
