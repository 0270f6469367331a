from __future__ import annotations

import re
import socket
import threading
from typing import Any, Optional, Tuple
from urllib.parse import urlsplit as _urlsplit

from curl_cffi import requests as curl_requests
import requests
from requests.adapters import HTTPAdapter
from urllib3 import HTTPConnectionPool, HTTPSConnectionPool

from .base import BaseFetcher
from .config import CHUNK_SIZE, IMPERSONATE

_SUPPORTED_SCHEMES = ("http", "https")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _check_url(url: str) -> None:
    """Raise ValueError if the URL cannot be parsed at all.

    A missing or unsupported scheme or a missing host is not a parse error;
    those URLs fail later, when the request is sent.
    """
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise ValueError(f"invalid control character in URL {url!r}")
    parts = _urlsplit(url)
    if _BAD_ESCAPE.search(parts.netloc + parts.path + parts.fragment):
        raise ValueError(f"invalid URL escape in {url!r}")
    parts.port  # raises ValueError on a non-numeric or out-of-range port


def _recording(pool_cls: type, sink: list) -> type:
    class RecordingPool(pool_cls):
        def _get_conn(self, timeout=None):
            conn = super()._get_conn(timeout)
            sink.append(conn)
            return conn

    return RecordingPool


class _WatchdogAdapter(HTTPAdapter):
    """HTTPAdapter that remembers every connection it hands out so abort() can cut them off."""

    def __init__(self, *args, **kwargs) -> None:
        self.connections: list = []
        super().__init__(*args, **kwargs)

    def init_poolmanager(self, *args, **kwargs) -> None:
        super().init_poolmanager(*args, **kwargs)
        self._track(self.poolmanager)

    def proxy_manager_for(self, *args, **kwargs):
        manager = super().proxy_manager_for(*args, **kwargs)
        self._track(manager)
        return manager

    def _track(self, manager) -> None:
        manager.pool_classes_by_scheme = {
            "http": _recording(HTTPConnectionPool, self.connections),
            "https": _recording(HTTPSConnectionPool, self.connections),
        }

    def abort(self) -> None:
        for conn in list(self.connections):
            sock = getattr(conn, "sock", None)
            if sock is None:
                continue
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:  # already closed
                continue


class RequestsFetcher(BaseFetcher):
    """Plain ``requests`` backend.

    requests only bounds connect and each socket read, so a watchdog timer
    shuts the connection down once the whole exchange (headers and body)
    has run past the timeout.
    """

    def __init__(self, *args, chunk_size: int = CHUNK_SIZE, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._chunk_size = chunk_size

    def build_request(self, url: str) -> str:
        _check_url(url)
        return url

    def send(self, request: str) -> Tuple[Optional[int], bytes]:
        expired = threading.Event()
        adapter = _WatchdogAdapter()

        def _expire() -> None:
            expired.set()
            adapter.abort()

        watchdog = threading.Timer(self._timeout, _expire)
        watchdog.daemon = True
        with requests.Session() as session:
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            watchdog.start()
            try:
                with session.get(request, headers=self.headers, stream=True, timeout=self._timeout) as resp:
                    body = b"".join(resp.iter_content(chunk_size=self._chunk_size))
                    status_code = resp.status_code
            except Exception as exc:  # noqa: BLE001
                if expired.is_set():
                    raise requests.Timeout(f"response not completed within {self._timeout}s") from exc
                raise
            finally:
                watchdog.cancel()

        # a connection shut down mid-body can look like a clean EOF
        if expired.is_set():
            raise requests.Timeout(f"response not completed within {self._timeout}s")
        return status_code, body


class CurlFetcher(BaseFetcher):
    """``curl_cffi`` backend presenting a desktop Chrome TLS fingerprint.

    curl's timeout already covers the whole transfer.
    """

    def __init__(self, *args, impersonate: str = IMPERSONATE, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._impersonate = impersonate

    def build_request(self, url: str) -> dict[str, Any]:
        _check_url(url)
        return {"method": "GET", "url": url, "headers": self.headers}

    def send(self, request: dict[str, Any]) -> Tuple[Optional[int], bytes]:
        # curl would guess a scheme for "example.com", so check before handing over
        parts = _urlsplit(request["url"])
        if parts.scheme.lower() not in _SUPPORTED_SCHEMES:
            raise curl_requests.RequestsError(f"unsupported protocol scheme in {request['url']!r}")
        if not parts.hostname:
            raise curl_requests.RequestsError(f"no host in {request['url']!r}")

        with curl_requests.Session() as session:
            resp = session.request(
                impersonate=self._impersonate,
                timeout=self._timeout,
                **request,
            )
            return resp.status_code, resp.content
