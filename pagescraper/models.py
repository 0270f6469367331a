from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


NO_TITLE = "No Title Found"
NO_DESCRIPTION = "No Description Found"
ERROR_TITLE = "Error"


class FetchOutcome(str, Enum):
    SUCCESS = "success"
    CONSTRUCTION_FAULT = "construction_fault"
    TRANSPORT_FAULT = "transport_fault"
    PARSE_FAULT = "parse_fault"


# Title written for records that never reached extraction.
_FAULT_TITLES = {
    FetchOutcome.CONSTRUCTION_FAULT: ERROR_TITLE,
    FetchOutcome.TRANSPORT_FAULT: NO_TITLE,
    FetchOutcome.PARSE_FAULT: NO_TITLE,
}


@dataclass(frozen=True)
class FetchResult:
    url: str
    outcome: FetchOutcome
    body: Optional[bytes] = None
    status_code: Optional[int] = None
    latency_ms: int = 0
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is FetchOutcome.SUCCESS


@dataclass(frozen=True)
class PageRecord:
    """Structured record extracted from one page.

    Fault records keep ``title`` and ``description`` as None; the sentinel
    strings are only filled in by ``to_dict()``.
    """

    url: str
    title: Optional[str]
    description: Optional[str]
    headings: Tuple[str, ...] = ()
    outcome: FetchOutcome = FetchOutcome.SUCCESS

    @classmethod
    def degraded(cls, url: str, outcome: FetchOutcome) -> "PageRecord":
        if outcome is FetchOutcome.SUCCESS:
            raise ValueError("degraded record needs a fault outcome")
        return cls(url=url, title=None, description=None, headings=(), outcome=outcome)

    def to_dict(self) -> Dict[str, Any]:
        title = self.title
        if title is None:
            title = _FAULT_TITLES.get(self.outcome, NO_TITLE)
        return {
            "url": self.url,
            "title": title,
            "description": self.description if self.description is not None else "",
            "headings": list(self.headings),
        }


@dataclass(frozen=True)
class BatchSnapshot:
    total: int
    success_count: int
    construction_fault_count: int
    transport_fault_count: int
    parse_fault_count: int
    avg_latency_ms: float
    timestamp: float = field(default=0.0)

    @property
    def failure_count(self) -> int:
        return self.total - self.success_count
