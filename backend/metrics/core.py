"""Minimal metrics registry - in-memory, thread-safe, no dependencies.

Goals:
* Basic counters and histograms for the menu analysis pipeline.
* Snapshot readable from tests and from the /metrics endpoint.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, List, Tuple, TypedDict

TagKey = Tuple[str, Tuple[Tuple[str, str], ...]]  # (metric_name, sorted_tags)


def _tag_key(name: str, tags: Dict[str, str]) -> TagKey:
    return name, tuple(sorted(tags.items()))


@dataclass
class Counter:
    name: str
    tags: Dict[str, str]
    _value: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False)

    def inc(self, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        with self._lock:
            self._value += amount

    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass
class Histogram:
    name: str
    tags: Dict[str, str]
    _values: List[float] = field(default_factory=list)
    _lock: Lock = field(default_factory=Lock, repr=False)
    _max_samples: int = 2000  # sliding window

    def observe(self, value: float) -> None:
        with self._lock:
            if len(self._values) >= self._max_samples:
                self._values.pop(0)
            self._values.append(value)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            vals = sorted(self._values)
        if not vals:
            return {"count": 0, "sum": 0.0, "avg": 0.0, "p50": 0.0, "p95": 0.0, "max": 0.0}
        count = len(vals)
        total = sum(vals)
        return {
            "count": count,
            "sum": total,
            "avg": total / count,
            "p50": vals[int(0.50 * (count - 1))],
            "p95": vals[int(0.95 * (count - 1))],
            "max": vals[-1],
        }


class CounterSnap(TypedDict):
    name: str
    tags: Dict[str, str]
    value: int


class HistogramSnap(TypedDict):
    name: str
    tags: Dict[str, str]
    count: int
    sum: float
    avg: float
    p50: float
    p95: float
    max: float


class RegistrySnapshot(TypedDict):
    counters: List[CounterSnap]
    histograms: List[HistogramSnap]
    generatedAt: float


class MetricsRegistry:
    def __init__(self) -> None:
        self._counters: Dict[TagKey, Counter] = {}
        self._histograms: Dict[TagKey, Histogram] = {}
        self._lock = Lock()

    def counter(self, name: str, **tags: str) -> Counter:
        key = _tag_key(name, tags)
        with self._lock:
            ctr = self._counters.get(key)
            if ctr is None:
                ctr = Counter(name=name, tags=tags)
                self._counters[key] = ctr
            return ctr

    def histogram(self, name: str, **tags: str) -> Histogram:
        key = _tag_key(name, tags)
        with self._lock:
            h = self._histograms.get(key)
            if h is None:
                h = Histogram(name=name, tags=tags)
                self._histograms[key] = h
            return h

    def counter_value(self, name: str, **tags: str) -> int:
        """Current value of a counter, 0 if it was never touched."""
        with self._lock:
            ctr = self._counters.get(_tag_key(name, tags))
        return ctr.value() if ctr else 0

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._histograms.clear()

    def snapshot(self) -> RegistrySnapshot:
        data: RegistrySnapshot = {
            "counters": [],
            "histograms": [],
            "generatedAt": time.time(),
        }
        # copy references under lock, read values outside to limit contention
        with self._lock:
            counters = list(self._counters.values())
            histograms = list(self._histograms.values())
        for c in counters:
            data["counters"].append({"name": c.name, "tags": c.tags, "value": c.value()})
        for h in histograms:
            snap = h.snapshot()
            data["histograms"].append(
                {
                    "name": h.name,
                    "tags": h.tags,
                    "count": snap["count"],
                    "sum": snap["sum"],
                    "avg": snap["avg"],
                    "p50": snap["p50"],
                    "p95": snap["p95"],
                    "max": snap["max"],
                }
            )
        return data


registry = MetricsRegistry()
