"""Tests for FetchTask, the fault-to-data boundary."""

import unittest
from unittest import mock

from pagescraper.base import BaseFetcher
from pagescraper.metrics import MetricsCollector
from pagescraper.models import FetchOutcome, FetchResult
from pagescraper.task import FetchTask


class _CannedFetcher(BaseFetcher):
    """Returns a fixed FetchResult instead of touching the network."""

    def __init__(self, outcome=FetchOutcome.SUCCESS, body=b""):
        super().__init__()
        self._outcome = outcome
        self._body = body

    def fetch(self, url):
        body = self._body if self._outcome is FetchOutcome.SUCCESS else None
        return FetchResult(url=url, outcome=self._outcome, body=body, status_code=200)

    def build_request(self, url):
        raise NotImplementedError

    def send(self, request):
        raise NotImplementedError


class TestFetchTaskSuccess(unittest.TestCase):
    """Verify extraction on a successful fetch."""

    def test_extracts_record(self):
        """A successful fetch is parsed into a full record."""
        html = (
            b"<title>T</title><meta name='description' content='D'>"
            b"<h1>A</h1><h2>B</h2><h3>C</h3>"
        )
        record = FetchTask(_CannedFetcher(body=html)).run("https://example.com")
        self.assertEqual(record.outcome, FetchOutcome.SUCCESS)
        self.assertEqual(
            record.to_dict(),
            {"url": "https://example.com", "title": "T", "description": "D", "headings": ["A", "B", "C"]},
        )

    def test_page_without_fields_gets_fallbacks(self):
        """Missing fields get fallbacks, not a fault."""
        record = FetchTask(_CannedFetcher(body=b"<p>plain</p>")).run("https://example.com")
        self.assertEqual(record.title, "No Title Found")
        self.assertEqual(record.description, "No Description Found")
        self.assertEqual(record.headings, ())


class TestFetchTaskFaults(unittest.TestCase):
    """Verify that every fault becomes a degraded record, never an exception."""

    def test_construction_fault(self):
        """A construction fault becomes an 'Error' record."""
        record = FetchTask(_CannedFetcher(FetchOutcome.CONSTRUCTION_FAULT)).run("%%bad")
        self.assertEqual(record.outcome, FetchOutcome.CONSTRUCTION_FAULT)
        self.assertEqual(record.to_dict()["title"], "Error")

    def test_transport_fault_skips_extraction(self):
        """A failed fetch short-circuits without parsing or extracting."""
        with mock.patch("pagescraper.task.parse_markup") as parse, mock.patch("pagescraper.task.extract") as extract:
            record = FetchTask(_CannedFetcher(FetchOutcome.TRANSPORT_FAULT)).run("https://down.example")
        parse.assert_not_called()
        extract.assert_not_called()
        self.assertEqual(
            record.to_dict(),
            {"url": "https://down.example", "title": "No Title Found", "description": "", "headings": []},
        )

    def test_parse_fault(self):
        """A parser failure becomes a parse-fault record."""
        with mock.patch("pagescraper.task.parse_markup", side_effect=ValueError("rejected markup")):
            with self.assertLogs("pagescraper.task", level="WARNING"):
                record = FetchTask(_CannedFetcher(body=b"\x00\x01")).run("https://example.com")
        self.assertEqual(record.outcome, FetchOutcome.PARSE_FAULT)
        self.assertEqual(record.to_dict()["title"], "No Title Found")
        self.assertEqual(record.to_dict()["description"], "")


class TestFetchTaskMetrics(unittest.TestCase):
    """Verify the final outcome of each run is recorded."""

    def test_records_outcomes(self):
        """Each run records its final outcome."""
        metrics = MetricsCollector()
        FetchTask(_CannedFetcher(body=b"<title>x</title>"), metrics=metrics).run("a")
        FetchTask(_CannedFetcher(FetchOutcome.TRANSPORT_FAULT), metrics=metrics).run("b")
        snap = metrics.snapshot()
        self.assertEqual(snap.total, 2)
        self.assertEqual(snap.success_count, 1)
        self.assertEqual(snap.transport_fault_count, 1)

    def test_fetch_details_logged_at_debug(self):
        """The fetch outcome and HTTP status are logged for each run."""
        with self.assertLogs("pagescraper.task", level="DEBUG") as logs:
            FetchTask(_CannedFetcher(body=b"<title>x</title>")).run("https://example.com")
        self.assertIn("outcome=success status=200", logs.output[0])

    def test_task_is_callable(self):
        """A FetchTask can be submitted directly as a callable."""
        task = FetchTask(_CannedFetcher(body=b"<title>x</title>"))
        self.assertEqual(task("u").title, "x")


if __name__ == "__main__":
    unittest.main()
