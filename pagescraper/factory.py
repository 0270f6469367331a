from __future__ import annotations

from typing import Dict

from .base import BaseFetcher
from .config import DEFAULT_TIMEOUT, USER_AGENT
from .fetchers import CurlFetcher, RequestsFetcher


class FetcherFactory:
    """Creates fetcher backends by name.

    Fetchers keep no per-request state (every send() opens its own session),
    so one instance per backend is cached and shared across tasks.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = USER_AGENT) -> None:
        self._timeout = timeout
        self._user_agent = user_agent
        self._cache: Dict[str, BaseFetcher] = {}

    def create_fetcher(self, backend: str) -> BaseFetcher:
        if backend in self._cache:
            return self._cache[backend]

        if backend == "requests":
            fetcher: BaseFetcher = RequestsFetcher(timeout=self._timeout, user_agent=self._user_agent)
        elif backend == "curl":
            fetcher = CurlFetcher(timeout=self._timeout, user_agent=self._user_agent)
        else:
            raise ValueError(f"Unknown backend: {backend}")

        self._cache[backend] = fetcher
        return fetcher
