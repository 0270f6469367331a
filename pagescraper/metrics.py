from __future__ import annotations

import time
from collections import deque
from threading import Lock
from typing import Deque

from .models import BatchSnapshot, FetchOutcome


class MetricsCollector:
    """Thread-safe collector of per-task outcomes.

    Every Fetch Task records its final outcome and latency here; snapshot()
    aggregates them for the end-of-run summary."""

    def __init__(self, maxlen: int = 10000) -> None:
        self._lock = Lock()
        self._events: Deque[tuple[float, str, FetchOutcome, int]] = deque(maxlen=maxlen)

    def record(self, url: str, outcome: FetchOutcome, latency_ms: int) -> None:
        """Record one finished task with the current timestamp."""
        with self._lock:
            self._events.append((time.time(), url, outcome, latency_ms))

    def snapshot(self) -> BatchSnapshot:
        """Return aggregated counters over every recorded task."""
        with self._lock:
            events = list(self._events)
        total = len(events)
        counts = {outcome: 0 for outcome in FetchOutcome}
        for _, _, outcome, _ in events:
            counts[outcome] += 1
        avg_latency_ms = (sum(e[3] for e in events) / total) if total else 0.0

        return BatchSnapshot(
            total=total,
            success_count=counts[FetchOutcome.SUCCESS],
            construction_fault_count=counts[FetchOutcome.CONSTRUCTION_FAULT],
            transport_fault_count=counts[FetchOutcome.TRANSPORT_FAULT],
            parse_fault_count=counts[FetchOutcome.PARSE_FAULT],
            avg_latency_ms=avg_latency_ms,
            timestamp=time.time(),
        )
