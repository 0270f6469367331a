"""Concurrent page fetch-and-extract pipeline.

Fetches a batch of URLs in parallel, parses each page and extracts a small
record (title, meta description, h1-h3 headings). Individual failures are
turned into degraded records; a batch always yields one record per URL.

Key modules:
    config        -- defaults (timeout, user agent, backend) and ScraperConfig
    models        -- FetchOutcome, FetchResult, PageRecord, BatchSnapshot
    base          -- BaseFetcher abstract fetch pipeline
    fetchers      -- RequestsFetcher, CurlFetcher backends
    factory       -- FetcherFactory for creating backends by name
    extractor     -- parse_markup() and extract()
    task          -- FetchTask, one URL to one PageRecord
    controller    -- BatchController scatter-gather and run_batch()
    metrics       -- MetricsCollector for the end-of-run summary
    storage       -- JsonArrayStorage and JsonlStorage output backends
    logging_setup -- configure_logging() for the CLI
"""
from __future__ import annotations

from .controller import BatchController, run_batch
from .models import FetchOutcome, PageRecord
from .task import FetchTask

__all__ = ["BatchController", "FetchOutcome", "FetchTask", "PageRecord", "run_batch"]
