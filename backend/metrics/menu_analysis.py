"""Instrumentation helpers for menu analysis.

Metrics:
* Counter menu_analysis_requests_total{status}
* Counter menu_dish_resolutions_total{source}
* Counter menu_image_search_total{provider,outcome}
* Counter menu_image_validation_total{valid}
* Histogram menu_analysis_cost_usd
* Histogram menu_analysis_latency_ms{status}

`status`: completed | cached | not_korean | too_many_items | usage_limit | failed
`source`: database | ai | failed
`outcome`: hit | miss | error | disabled
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from .core import RegistrySnapshot, registry


def record_request(status: str) -> None:
    registry.counter("menu_analysis_requests_total", status=status).inc()


def record_dish_resolution(source: str) -> None:
    registry.counter("menu_dish_resolutions_total", source=source).inc()


def record_image_search(provider: str, outcome: str) -> None:
    registry.counter("menu_image_search_total", provider=provider, outcome=outcome).inc()


def record_image_validation(valid: bool) -> None:
    registry.counter("menu_image_validation_total", valid=str(valid).lower()).inc()


def record_cost_usd(cost: float) -> None:
    registry.histogram("menu_analysis_cost_usd").observe(cost)


def record_latency_ms(ms: float, *, status: str) -> None:
    registry.histogram("menu_analysis_latency_ms", status=status).observe(ms)


@contextmanager
def time_analysis() -> Iterator[None]:
    """Measure one analysis; latency is tagged completed or failed."""
    start = time.perf_counter()
    status = "completed"
    try:
        yield
    except Exception:
        status = "failed"
        raise
    finally:
        record_latency_ms((time.perf_counter() - start) * 1000.0, status=status)


def snapshot() -> RegistrySnapshot:
    return registry.snapshot()


def reset_all() -> None:
    """Reset every metric (tests)."""
    registry.reset()
