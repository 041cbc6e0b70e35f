# application/services/request_log.py
from __future__ import annotations

from threading import Lock
from typing import List

from domain.load_test import RequestRecord


class RequestLog:
    """Append-only log shared by load-test workers."""

    def __init__(self) -> None:
        self._records: List[RequestRecord] = []
        self._lock = Lock()

    def append(self, record: RequestRecord) -> None:
        with self._lock:
            self._records.append(record)

    def list(self) -> List[RequestRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
