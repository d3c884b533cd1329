"""Per-company, per-period task ledger."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator

from filing_engine.services.state_machine import (
    TaskStateMachine,
    TaskStatus,
    TransitionGuard,
    TransitionSource,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass
class OperationTask:
    """One filing obligation of one company in one period."""

    company_id: str
    period: str
    template_key: str
    status: TaskStatus = TaskStatus.NEW
    raw_value: str | None = None
    template_name: str | None = None
    assignee_name: str | None = None
    comment: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    verified_at: datetime | None = None

    @property
    def task_id(self) -> str:
        return f"{self.company_id}:{self.period}:{self.template_key}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "template_key": self.template_key,
            "status": self.status.value,
            "raw_value": self.raw_value,
            "template_name": self.template_name,
            "assignee_name": self.assignee_name,
            "comment": self.comment,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "verified_at": _iso(self.verified_at),
        }

    @classmethod
    def from_dict(cls, company_id: str, period: str, data: dict[str, Any]) -> OperationTask:
        return cls(
            company_id=company_id,
            period=period,
            template_key=data["template_key"],
            status=TaskStatus(data.get("status", TaskStatus.NEW.value)),
            raw_value=data.get("raw_value"),
            template_name=data.get("template_name"),
            assignee_name=data.get("assignee_name"),
            comment=data.get("comment"),
            created_at=_parse(data.get("created_at")) or utcnow(),
            updated_at=_parse(data.get("updated_at")) or utcnow(),
            verified_at=_parse(data.get("verified_at")),
        )


@dataclass(frozen=True)
class TaskChange:
    """A task that was created or re-statused."""

    company_id: str
    period: str
    template_key: str
    old_status: TaskStatus | None
    new_status: TaskStatus
    raw_value: str | None

    @property
    def created(self) -> bool:
        return self.old_status is None


@dataclass
class TaskLedger:
    """All tasks of one company in one period, keyed by template key.

    The ledger is the unit of persistence: it is merged in memory and
    written back whole.
    """

    company_id: str
    period: str
    tasks: dict[str, OperationTask] = field(default_factory=dict)
    updated_at: datetime | None = None

    def __iter__(self) -> Iterator[OperationTask]:
        return iter(self.tasks.values())

    def __len__(self) -> int:
        return len(self.tasks)

    def __contains__(self, template_key: object) -> bool:
        return template_key in self.tasks

    def get(self, template_key: str) -> OperationTask | None:
        return self.tasks.get(template_key)

    def set_status(
        self,
        template_key: str,
        status: TaskStatus,
        raw_value: str | None = None,
        *,
        source: TransitionSource = TransitionSource.MANUAL,
        guard: TransitionGuard | None = None,
        template_name: str | None = None,
        assignee_name: str | None = None,
        now: datetime | None = None,
    ) -> TaskChange | None:
        """Create or re-status a task.

        Returns the change, or None when status and raw value already match.
        ``raw_value=None`` keeps the stored raw value. Raises
        InvalidTransitionError if the guard refuses the transition.
        """
        now = now or utcnow()
        status = TaskStatus(status)
        task = self.tasks.get(template_key)

        if task is None:
            task = OperationTask(
                company_id=self.company_id,
                period=self.period,
                template_key=template_key,
                status=status,
                raw_value=raw_value,
                template_name=template_name,
                assignee_name=assignee_name,
                created_at=now,
                updated_at=now,
                verified_at=now if status is TaskStatus.APPROVED else None,
            )
            self.tasks[template_key] = task
            self.updated_at = now
            return TaskChange(self.company_id, self.period, template_key, None, status, raw_value)

        new_raw = task.raw_value if raw_value is None else raw_value
        if task.status is status and task.raw_value == new_raw:
            return None

        old_status = task.status
        if old_status is not status:
            TaskStateMachine.validate_transition(old_status.value, status.value)
            if guard is not None:
                guard.check(old_status, status, source)

        task.status = status
        task.raw_value = new_raw
        task.updated_at = now
        if status is TaskStatus.APPROVED:
            task.verified_at = task.verified_at if old_status is TaskStatus.APPROVED else now
        else:
            task.verified_at = None
        self.updated_at = now
        return TaskChange(self.company_id, self.period, template_key, old_status, status, new_raw)

    def set_template_enabled(
        self,
        template_key: str,
        enabled: bool,
        *,
        template_name: str | None = None,
        now: datetime | None = None,
    ) -> TaskChange | None:
        """Apply the enable/disable convention to one template's task.

        Enabling only resets a task that is currently disabled; live
        statuses are left alone.
        """
        if enabled:
            task = self.tasks.get(template_key)
            if task is not None and task.status is not TaskStateMachine.DISABLED_STATUS:
                return None
            status = TaskStateMachine.REENABLED_STATUS
        else:
            status = TaskStateMachine.DISABLED_STATUS
        return self.set_status(
            template_key,
            status,
            source=TransitionSource.MANUAL,
            template_name=template_name,
            now=now,
        )

    def copy(self) -> TaskLedger:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "company_id": self.company_id,
            "period": self.period,
            "updated_at": _iso(self.updated_at),
            "tasks": [task.to_dict() for task in self.tasks.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskLedger:
        company_id = data["company_id"]
        period = data["period"]
        ledger = cls(
            company_id=company_id, period=period, updated_at=_parse(data.get("updated_at"))
        )
        for item in data.get("tasks", []):
            task = OperationTask.from_dict(company_id, period, item)
            # Later duplicates replace earlier ones: one task per template key.
            ledger.tasks[task.template_key] = task
        return ledger
