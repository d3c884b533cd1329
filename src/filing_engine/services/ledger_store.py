"""Task ledger stores.

A store reads and writes whole ledgers keyed by (company_id, period):
``put_ledger`` replaces whatever was stored for that key.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from filing_engine.models import TaskLedgerRecord
from filing_engine.services.task_ledger import TaskLedger


class LedgerStore(Protocol):
    """Read/write contract used by the reconciliation engine."""

    def get_ledger(self, company_id: str, period: str) -> TaskLedger:
        """Return the stored ledger, or an empty one."""
        ...

    def put_ledger(self, company_id: str, period: str, ledger: TaskLedger) -> None:
        """Replace the stored ledger."""
        ...


class InMemoryLedgerStore:
    """Dict-backed store. Keeps copies so callers cannot mutate stored state."""

    def __init__(self) -> None:
        self._ledgers: dict[tuple[str, str], TaskLedger] = {}
        self.write_count = 0

    def get_ledger(self, company_id: str, period: str) -> TaskLedger:
        stored = self._ledgers.get((company_id, period))
        if stored is None:
            return TaskLedger(company_id=company_id, period=period)
        return stored.copy()

    def put_ledger(self, company_id: str, period: str, ledger: TaskLedger) -> None:
        self._ledgers[(company_id, period)] = ledger.copy()
        self.write_count += 1

    def keys(self) -> list[tuple[str, str]]:
        return sorted(self._ledgers)


class SqlLedgerStore:
    """Store backed by the task_ledger table.

    Writes are flushed, not committed: the caller's transaction decides
    whether a batch lands.
    """

    def __init__(self, session: Session):
        self.session = session

    def _load(self, company_id: str, period: str) -> TaskLedgerRecord | None:
        return self.session.execute(
            select(TaskLedgerRecord).where(
                TaskLedgerRecord.company_id == company_id,
                TaskLedgerRecord.period == period,
            )
        ).scalar_one_or_none()

    def get_ledger(self, company_id: str, period: str) -> TaskLedger:
        record = self._load(company_id, period)
        if record is None:
            return TaskLedger(company_id=company_id, period=period)
        return TaskLedger.from_dict({
            "company_id": company_id,
            "period": period,
            "updated_at": record.updated_at.isoformat() if record.updated_at else None,
            "tasks": record.tasks or [],
        })

    def put_ledger(self, company_id: str, period: str, ledger: TaskLedger) -> None:
        tasks = ledger.to_dict()["tasks"]
        record = self._load(company_id, period)
        if record is None:
            record = TaskLedgerRecord(
                company_id=company_id,
                period=period,
                tasks=tasks,
                updated_at=ledger.updated_at,
            )
            self.session.add(record)
        else:
            record.tasks = tasks
            record.updated_at = ledger.updated_at
        self.session.flush()

    def list_ledgers(self, period: str) -> list[TaskLedger]:
        """All ledgers stored for a period."""
        records = self.session.execute(
            select(TaskLedgerRecord)
            .where(TaskLedgerRecord.period == period)
            .order_by(TaskLedgerRecord.company_id)
        ).scalars()
        return [
            TaskLedger.from_dict({
                "company_id": r.company_id,
                "period": r.period,
                "tasks": r.tasks or [],
            })
            for r in records
        ]
