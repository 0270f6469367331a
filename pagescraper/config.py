"""Constants and tuning parameters for the page scraper."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

#: Client-side timeout in seconds for one whole request/response cycle.
DEFAULT_TIMEOUT: float = 15.0

#: Desktop browser user agent; some sites serve reduced pages to unknown clients.
USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

DEFAULT_BACKEND: str = "requests"
BACKENDS = ("requests", "curl")

#: Browser fingerprint used by the curl_cffi backend.
IMPERSONATE: str = "chrome120"

#: Body is drained in chunks of this many bytes so the deadline can be checked.
CHUNK_SIZE: int = 64 * 1024


@dataclass(frozen=True)
class ScraperConfig:
    timeout: float = DEFAULT_TIMEOUT
    backend: str = DEFAULT_BACKEND
    max_workers: Optional[int] = None
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {self.backend}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScraperConfig":
        """Build a config from ``PAGESCRAPER_*`` environment variables."""
        env = os.environ if environ is None else environ
        max_workers = env.get("PAGESCRAPER_MAX_WORKERS")
        return cls(
            timeout=float(env.get("PAGESCRAPER_TIMEOUT", DEFAULT_TIMEOUT)),
            backend=env.get("PAGESCRAPER_BACKEND", DEFAULT_BACKEND),
            max_workers=int(max_workers) if max_workers else None,
        )
