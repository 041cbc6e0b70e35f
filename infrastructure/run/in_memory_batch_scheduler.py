# infrastructure/run/in_memory_batch_scheduler.py
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Callable, Dict, Optional

from application.ports.batch_scheduler import BatchSchedulerPort


class InMemoryBatchScheduler(BatchSchedulerPort):
    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = Lock()
        self._futures: Dict[str, Future] = {}

    def submit(self, batch_id: str, task: Callable[[], object]) -> Future:
        with self._lock:
            future = self._executor.submit(task)
            self._futures[batch_id] = future
            return future

    def wait(self, batch_id: str, timeout_sec: float) -> bool:
        future = self.get_future(batch_id)
        if future is None:
            return False
        try:
            future.result(timeout=timeout_sec)
        except Exception:
            return future.done()
        return True

    def get_future(self, batch_id: str) -> Optional[Future]:
        with self._lock:
            return self._futures.get(batch_id)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
