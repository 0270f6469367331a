from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, Sequence, TextIO

from pagescraper.config import BACKENDS, ScraperConfig
from pagescraper.controller import BatchController
from pagescraper.factory import FetcherFactory
from pagescraper.logging_setup import configure_logging
from pagescraper.metrics import MetricsCollector
from pagescraper.models import PageRecord
from pagescraper.storage import JsonArrayStorage, JsonlStorage, StorageBase
from pagescraper.task import FetchTask

logger = logging.getLogger("pagescraper.main")

EXIT_FATAL = 2


def _load_urls(path: str) -> list[str]:
    urls: list[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            url = line.strip()
            if not url:
                continue
            urls.append(url)
    return urls


def _prompt_urls(input_fn: Callable[[str], str] = input) -> list[str]:
    """Ask for a count, then the URLs.

    Answers are split on whitespace, so several URLs may be given on one
    line and blank lines are skipped. Raises ValueError if the count is not
    a non-negative integer.
    """
    pending: list[str] = []

    def next_token(prompt: str) -> str:
        while not pending:
            pending.extend(input_fn(prompt).split())
        return pending.pop(0)

    raw = next_token("Enter number of URLs: ")
    try:
        count = int(raw)
    except ValueError:
        raise ValueError(f"Invalid number of URLs: {raw!r}") from None
    if count < 0:
        raise ValueError(f"Invalid number of URLs: {count}")

    return [next_token(f"Enter URL {i + 1}: ") for i in range(count)]


def run(
    urls: Sequence[str],
    config: ScraperConfig,
    out: TextIO,
    jsonl_path: Optional[str] = None,
) -> List[PageRecord]:
    metrics = MetricsCollector()
    fetcher = FetcherFactory(timeout=config.timeout, user_agent=config.user_agent).create_fetcher(config.backend)
    controller = BatchController(FetchTask(fetcher, metrics=metrics), max_workers=config.max_workers)

    records = controller.run_batch(urls)

    storages: list[StorageBase] = [JsonArrayStorage(out)]
    if jsonl_path:
        storages.append(JsonlStorage(jsonl_path))
    for record in records:
        logger.debug("url=%s outcome=%s headings=%d", record.url, record.outcome.value, len(record.headings))
        for storage in storages:
            storage.write(record)
    for storage in storages:
        storage.close()

    snap = metrics.snapshot()
    logger.info(
        "DONE: total=%d success=%d failed=%d construction_fault=%d transport_fault=%d parse_fault=%d avg_latency_ms=%.1f",
        snap.total,
        snap.success_count,
        snap.failure_count,
        snap.construction_fault_count,
        snap.transport_fault_count,
        snap.parse_fault_count,
        snap.avg_latency_ms,
    )
    return records


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch pages concurrently and print title, description and headings as JSON.")
    parser.add_argument("urls", nargs="*", help="URLs to fetch (prompted for interactively when omitted)")
    parser.add_argument("--urls-file", help="Path to a file with one URL per line")
    parser.add_argument("--jsonl", help="Also append records to this JSON Lines file")

    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds (default 15)")
    parser.add_argument("--backend", choices=BACKENDS, default=None, help="HTTP backend")
    parser.add_argument("--max-workers", type=int, default=None, help="Bound the number of concurrent fetches")
    parser.add_argument("--log-level", default=None, help="Logging level (default INFO)")
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    input_fn: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
) -> int:
    args = _build_parser().parse_args(argv)

    try:
        configure_logging(args.log_level)
        env_config = ScraperConfig.from_env()
        config = ScraperConfig(
            timeout=args.timeout if args.timeout is not None else env_config.timeout,
            backend=args.backend or env_config.backend,
            max_workers=args.max_workers if args.max_workers is not None else env_config.max_workers,
        )
        if args.urls:
            urls = list(args.urls)
        elif args.urls_file:
            urls = _load_urls(args.urls_file)
        else:
            urls = _prompt_urls(input_fn)
    except (ValueError, OSError, EOFError) as exc:
        logger.error("Cannot start batch: %s", exc)
        return EXIT_FATAL

    run(urls, config, out if out is not None else sys.stdout, jsonl_path=args.jsonl)
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
