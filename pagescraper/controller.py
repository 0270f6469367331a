from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, List, Optional

from .config import DEFAULT_BACKEND, DEFAULT_TIMEOUT
from .factory import FetcherFactory
from .metrics import MetricsCollector
from .models import PageRecord
from .task import FetchTask

logger = logging.getLogger(__name__)


class BatchController:
    """Scatter-gather over a batch of URLs.

    Every URL is submitted to the pool before any result is awaited, and
    run_batch() returns once all of them have finished. Results come back in
    completion order, not submission order; match them to inputs by
    ``record.url``.

    With ``max_workers=None`` the pool gets one thread per URL. That is fine
    for small interactive batches but is the scalability ceiling for large
    ones; pass ``max_workers`` to bound it.
    """

    def __init__(self, task: Callable[[str], PageRecord], max_workers: Optional[int] = None) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._task = task
        self._max_workers = max_workers

    def run_batch(self, urls: Iterable[str]) -> List[PageRecord]:
        urls = list(urls)
        if not urls:
            return []

        workers = len(urls) if self._max_workers is None else min(self._max_workers, len(urls))
        logger.debug("Fetching %d url(s) with %d worker(s)", len(urls), workers)

        records: List[PageRecord] = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as executor:
            futures = [executor.submit(self._task, url) for url in urls]
            for fut in as_completed(futures):
                records.append(fut.result())
        return records


def run_batch(
    urls: Iterable[str],
    backend: str = DEFAULT_BACKEND,
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: Optional[int] = None,
    metrics: Optional[MetricsCollector] = None,
) -> List[PageRecord]:
    """Fetch and extract every URL with a freshly built pipeline."""
    fetcher = FetcherFactory(timeout=timeout).create_fetcher(backend)
    controller = BatchController(FetchTask(fetcher, metrics=metrics), max_workers=max_workers)
    return controller.run_batch(urls)
