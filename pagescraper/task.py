from __future__ import annotations

import logging
import time
from typing import Optional

from .base import BaseFetcher
from .extractor import extract, parse_markup
from .metrics import MetricsCollector
from .models import FetchOutcome, PageRecord

logger = logging.getLogger(__name__)


class FetchTask:
    """Fetches one URL and turns it into a PageRecord.

    run() is the boundary where every lower-level fault becomes data: it
    never raises, and always returns exactly one record for its URL.
    """

    def __init__(self, fetcher: BaseFetcher, metrics: Optional[MetricsCollector] = None) -> None:
        self._fetcher = fetcher
        self._metrics = metrics

    def run(self, url: str) -> PageRecord:
        start_ms = self._now_ms()
        result = self._fetcher.fetch(url)
        logger.debug(
            "Fetched %s outcome=%s status=%s error=%s",
            url,
            result.outcome.value,
            result.status_code,
            result.error_type,
        )
        if not result.ok:
            return self._finish(PageRecord.degraded(url, result.outcome), start_ms)

        try:
            title, description, headings = extract(parse_markup(result.body))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Error parsing HTML from %s: %s", url, exc)
            return self._finish(PageRecord.degraded(url, FetchOutcome.PARSE_FAULT), start_ms)

        record = PageRecord(
            url=url,
            title=title,
            description=description,
            headings=tuple(headings),
        )
        return self._finish(record, start_ms)

    def __call__(self, url: str) -> PageRecord:
        return self.run(url)

    def _finish(self, record: PageRecord, start_ms: int) -> PageRecord:
        if self._metrics:
            self._metrics.record(record.url, record.outcome, self._now_ms() - start_ms)
        return record

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
