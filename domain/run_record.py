# domain/run_record.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class RunStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({RunStatus.PASSED, RunStatus.FAILED})

# flavor name for runs without a browser
API_FLAVOR = "api"


def pairing_run_id(test_id: str, flavor: str, execution_id: Optional[str] = None) -> str:
    """`<test>@<flavor>`, suffixed with `#<execution>` to tell repeated runs of one pairing apart."""
    base = f"{test_id}@{flavor}"
    return f"{base}#{execution_id}" if execution_id else base


@dataclass(frozen=True)
class RunRecord:
    run_id: str
    test_id: str
    flavor: str
    status: RunStatus
    created_at: datetime
    updated_at: datetime
    error: Optional[str] = None

    def with_status(
        self,
        status: RunStatus,
        updated_at: datetime,
        error: Optional[str] = None,
    ) -> "RunRecord":
        return RunRecord(
            run_id=self.run_id,
            test_id=self.test_id,
            flavor=self.flavor,
            status=status,
            created_at=self.created_at,
            updated_at=updated_at,
            error=error if error is not None else self.error,
        )
