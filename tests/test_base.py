"""Tests for the BaseFetcher abstract class."""

import unittest

from pagescraper.base import BaseFetcher
from pagescraper.models import FetchOutcome


class _StubFetcher(BaseFetcher):
    def __init__(self, build_exc=None, send_exc=None, body=b"<title>x</title>", **kwargs):
        super().__init__(**kwargs)
        self.build_exc = build_exc
        self.send_exc = send_exc
        self.body = body
        self.sent = []

    def build_request(self, url):
        if self.build_exc:
            raise self.build_exc
        return {"url": url, "headers": self.headers}

    def send(self, request):
        self.sent.append(request)
        if self.send_exc:
            raise self.send_exc
        return 200, self.body


class TestBaseFetcherFaults(unittest.TestCase):
    """Verify that each pipeline stage maps to its own fault class."""

    def test_build_failure_is_construction_fault(self):
        """If build_request() raises, fetch() reports a construction fault and never sends."""
        fetcher = _StubFetcher(build_exc=ValueError("bad url"))
        with self.assertLogs("pagescraper.base", level="WARNING"):
            result = fetcher.fetch("::bad::")
        self.assertEqual(result.outcome, FetchOutcome.CONSTRUCTION_FAULT)
        self.assertEqual(result.error_type, "ValueError")
        self.assertIsNone(result.body)
        self.assertEqual(fetcher.sent, [])

    def test_send_failure_is_transport_fault(self):
        """If send() raises, fetch() reports a transport fault."""
        fetcher = _StubFetcher(send_exc=ConnectionError("network down"))
        with self.assertLogs("pagescraper.base", level="WARNING"):
            result = fetcher.fetch("https://example.com")
        self.assertEqual(result.outcome, FetchOutcome.TRANSPORT_FAULT)
        self.assertEqual(result.error_type, "ConnectionError")
        self.assertFalse(result.ok)

    def test_success_carries_body_and_status(self):
        """A successful send() is passed through with its status and body."""
        fetcher = _StubFetcher()
        result = fetcher.fetch("https://example.com")
        self.assertTrue(result.ok)
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.body, b"<title>x</title>")
        self.assertIsNone(result.error_type)
        self.assertGreaterEqual(result.latency_ms, 0)


class TestBaseFetcherConfig(unittest.TestCase):
    """Verify constructor validation and fixed headers."""

    def test_rejects_non_positive_timeout(self):
        """A zero timeout is rejected."""
        with self.assertRaises(ValueError):
            _StubFetcher(timeout=0)

    def test_default_timeout_and_browser_user_agent(self):
        """Defaults are the 15s timeout and a desktop browser User-Agent."""
        fetcher = _StubFetcher()
        self.assertEqual(fetcher.timeout, 15.0)
        self.assertIn("Mozilla/5.0", fetcher.headers["User-Agent"])


if __name__ == "__main__":
    unittest.main()
