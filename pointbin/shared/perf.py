"""
Lightweight performance instrumentation helpers.

Loaders time their stages (read, decode, bounds) with ``PerfMonitor`` and
attach the timings to the load result, so benchmarking the streamed and bulk
paths needs no changes to the decode code.
"""

from __future__ import annotations

import time
from contextlib import contextmanager


class PerfMonitor:
    """
    Context-style helper for timing multi-stage work.
    """

    def __init__(self, label: str | None = None) -> None:
        self.label = label or ""
        self._start = time.perf_counter()
        self._timings: dict[str, float] = {}

    @contextmanager
    def track(self, stage: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timings[stage] = (time.perf_counter() - start) * 1000

    def stop(self) -> tuple[dict[str, float], float]:
        """
        Finish timing and return (stage_timings, total_ms).
        """
        total_ms = (time.perf_counter() - self._start) * 1000
        return self._timings.copy(), total_ms


def format_size(num_bytes: int) -> str:
    """Human-readable size in KB below one megabyte, MB above."""
    if num_bytes >= 1024 * 1024:
        return f"{num_bytes / (1024 * 1024):.2f} MB"
    return f"{num_bytes / 1024:.1f} KB"
