from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from .config import DEFAULT_TIMEOUT, USER_AGENT
from .models import FetchOutcome, FetchResult

logger = logging.getLogger(__name__)


class BaseFetcher(ABC):
    """Abstract base class defining the fetch pipeline for one URL.

    The pipeline has two stages with distinct fault classes:
    - build_request(): any exception is a construction fault.
    - send(): any exception (DNS, connect, TLS, timeout, body read) is a
      transport fault.

    fetch() never raises; faults come back as FetchResult.outcome.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = USER_AGENT) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self._user_agent}

    def fetch(self, url: str) -> FetchResult:
        start_ms = self._now_ms()

        try:
            request = self.build_request(url)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Error creating request for %s: %s", url, exc)
            return FetchResult(
                url=url,
                outcome=FetchOutcome.CONSTRUCTION_FAULT,
                latency_ms=self._now_ms() - start_ms,
                error_type=type(exc).__name__,
            )

        try:
            status_code, body = self.send(request)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Request failed for %s: %s", url, exc)
            return FetchResult(
                url=url,
                outcome=FetchOutcome.TRANSPORT_FAULT,
                latency_ms=self._now_ms() - start_ms,
                error_type=type(exc).__name__,
            )

        return FetchResult(
            url=url,
            outcome=FetchOutcome.SUCCESS,
            body=body,
            status_code=status_code,
            latency_ms=self._now_ms() - start_ms,
        )

    @abstractmethod
    def build_request(self, url: str) -> Any:
        ...

    @abstractmethod
    def send(self, request: Any) -> Tuple[Optional[int], bytes]:
        """Perform the request and return ``(status_code, body)``.

        The body must be fully read and the connection released before
        returning, on every exit path.
        """

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
