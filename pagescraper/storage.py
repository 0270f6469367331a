from __future__ import annotations

import json
import queue
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, TextIO

from .models import PageRecord


class StorageBase(ABC):
    """Abstract base class for all output backends.

    Subclasses must implement write() and close(); records are serialized
    through PageRecord.to_dict().
    """

    @abstractmethod
    def write(self, record: PageRecord) -> None:
        """Persist a single page record."""

    @abstractmethod
    def close(self) -> None:
        """Flush pending writes and release resources."""


class JsonArrayStorage(StorageBase):
    """Collects records and writes them as one indented JSON array on close()."""

    def __init__(self, stream: TextIO, indent: int = 2) -> None:
        self._stream = stream
        self._indent = indent
        self._records: List[PageRecord] = []

    def write(self, record: PageRecord) -> None:
        self._records.append(record)

    def close(self) -> None:
        payload = [r.to_dict() for r in self._records]
        self._stream.write(json.dumps(payload, indent=self._indent, ensure_ascii=False) + "\n")
        self._stream.flush()


class JsonlStorage(StorageBase):
    """Appends records as JSON Lines (.jsonl) using a background writer thread."""

    def __init__(self, path: str) -> None:
        self._path = path
        self._queue: queue.Queue[Optional[PageRecord]] = queue.Queue()
        self._thread = threading.Thread(target=self._writer, daemon=True)
        self._thread.start()

    def write(self, record: PageRecord) -> None:
        """Enqueue a record for background writing."""
        self._queue.put(record)

    def close(self) -> None:
        """Signal the writer thread to flush and stop."""
        self._queue.put(None)
        self._thread.join(timeout=5)

    def _writer(self) -> None:
        with open(self._path, "a", encoding="utf-8") as f:
            while True:
                item = self._queue.get()
                if item is None:
                    break
                f.write(json.dumps(item.to_dict(), ensure_ascii=False) + "\n")
                f.flush()
