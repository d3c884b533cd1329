"""Manual task operations: status toggles and template enable/disable."""

from __future__ import annotations

import logging
from datetime import datetime

from filing_engine.periods import period_storage_key
from filing_engine.services.ledger_store import LedgerStore
from filing_engine.services.state_machine import TaskStatus, TransitionGuard, TransitionSource
from filing_engine.services.task_ledger import TaskChange, TaskLedger
from filing_engine.templates import get_template
from filing_engine.types import Company

logger = logging.getLogger(__name__)


class TaskService:
    """Single-task writes against a ledger store.

    Every write still goes through a whole-ledger read, merge and replace.
    """

    def __init__(
        self,
        store: LedgerStore,
        *,
        guard: TransitionGuard | None = None,
        language: str = "uz",
    ):
        self.store = store
        self.guard = guard
        self.language = language

    def get_ledger(self, company_id: str, period: str) -> TaskLedger:
        return self.store.get_ledger(company_id, period_storage_key(period))

    def set_task_status(
        self,
        company_id: str,
        period: str,
        template_key: str,
        status: TaskStatus | str,
        *,
        comment: str | None = None,
        now: datetime | None = None,
    ) -> TaskChange | None:
        """Set one task's status by hand, creating the task if needed.

        Raises:
            UnknownTemplateError: If the template key is not in the catalog
            ValueError: If the status is not a TaskStatus value
            InvalidTransitionError: If a guard refuses the transition
        """
        template = get_template(template_key)
        period_key = period_storage_key(period)
        ledger = self.store.get_ledger(company_id, period_key)

        change = ledger.set_status(
            template_key,
            TaskStatus(status),
            source=TransitionSource.MANUAL,
            guard=self.guard,
            template_name=template.display_name(self.language),
            now=now,
        )
        dirty = change is not None
        task = ledger.get(template_key)
        if comment is not None and task is not None and task.comment != comment:
            task.comment = comment
            dirty = True

        if dirty:
            self.store.put_ledger(company_id, period_key, ledger)
            logger.info(
                "Task %s/%s/%s set to %s by hand",
                company_id,
                period_key,
                template_key,
                task.status.value if task else status,
            )
        return change

    def set_template_enabled(
        self,
        company_id: str,
        period: str,
        template_key: str,
        enabled: bool,
        *,
        now: datetime | None = None,
    ) -> TaskChange | None:
        """Enable or disable a template for one company's period ledger."""
        template = get_template(template_key)
        period_key = period_storage_key(period)
        ledger = self.store.get_ledger(company_id, period_key)

        change = ledger.set_template_enabled(
            template_key,
            enabled,
            template_name=template.display_name(self.language),
            now=now,
        )
        if change is not None:
            self.store.put_ledger(company_id, period_key, ledger)
        return change

    def apply_enabled_templates(
        self,
        company: Company,
        period: str,
        *,
        now: datetime | None = None,
    ) -> list[TaskChange]:
        """Bring a ledger in line with the company's enabled-template set."""
        period_key = period_storage_key(period)
        ledger = self.store.get_ledger(company.id, period_key)
        changes: list[TaskChange] = []

        for task in list(ledger):
            change = ledger.set_template_enabled(
                task.template_key,
                company.is_template_enabled(task.template_key),
                now=now,
            )
            if change is not None:
                changes.append(change)

        if company.enabled_templates:
            for template_key in sorted(company.enabled_templates):
                if template_key in ledger:
                    continue
                template = get_template(template_key)
                changes.append(
                    ledger.set_status(
                        template_key,
                        TaskStatus.NEW,
                        template_name=template.display_name(self.language),
                        assignee_name=company.accountant_name,
                        now=now,
                    )
                )

        if changes:
            self.store.put_ledger(company.id, period_key, ledger)
        return changes
