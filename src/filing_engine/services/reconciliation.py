"""Roster reconciliation - merge external snapshots into task ledgers.

Drives each roster record through company matching and status mapping,
merges the result into the company's ledger for the period, and writes
back only the ledgers that changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from filing_engine.periods import period_storage_key
from filing_engine.services.ledger_store import LedgerStore
from filing_engine.services.state_machine import (
    InvalidTransitionError,
    TransitionGuard,
    TransitionSource,
)
from filing_engine.services.task_ledger import TaskChange, TaskLedger, utcnow
from filing_engine.sync.company_matcher import CompanyMatcher, MatchedBy
from filing_engine.sync.field_mapper import FieldMapper
from filing_engine.templates import (
    COLUMN_TO_TEMPLATE,
    NAME_COLUMN,
    TAX_ID_COLUMN,
    TEMPLATES_BY_KEY,
    normalize_header,
)
from filing_engine.types import Company

logger = logging.getLogger(__name__)


class ReconciliationError(Exception):
    """Raised when a reconciliation batch is aborted."""


class LedgerWriteError(ReconciliationError):
    """Raised when the store refuses a ledger write.

    ``result`` holds the counts up to the failure; ledgers listed in
    ``result.written`` were already replaced.
    """

    def __init__(
        self, company_id: str, period: str, result: ReconciliationResult, cause: Exception
    ):
        self.company_id = company_id
        self.period = period
        self.result = result
        self.cause = cause
        super().__init__(
            f"Failed to write ledger for company {company_id} period {period}: {cause}"
        )


@dataclass(frozen=True)
class SkippedRecord:
    """A roster record no company matched."""

    row: int
    tax_id: str
    name: str


@dataclass(frozen=True)
class RejectedTransition:
    """A status change refused by the transition guard."""

    company_id: str
    template_key: str
    reason: str


@dataclass
class ReconciliationResult:
    """Result of one reconciliation batch."""

    period: str
    dry_run: bool = False
    records_processed: int = 0
    records_matched: int = 0
    matched_by_name: int = 0
    skipped: list[SkippedRecord] = field(default_factory=list)
    changes: list[TaskChange] = field(default_factory=list)
    rejected: list[RejectedTransition] = field(default_factory=list)
    write_set: dict[tuple[str, str], TaskLedger] = field(default_factory=dict)
    written: list[tuple[str, str]] = field(default_factory=list)

    @property
    def records_skipped(self) -> int:
        return len(self.skipped)

    @property
    def dirty_ledgers(self) -> int:
        return len(self.write_set)

    @property
    def tasks_created(self) -> int:
        return sum(1 for c in self.changes if c.created)

    @property
    def tasks_updated(self) -> int:
        return sum(1 for c in self.changes if not c.created)

    def summary(self) -> dict[str, int | str | bool]:
        return {
            "period": self.period,
            "dry_run": self.dry_run,
            "records_processed": self.records_processed,
            "records_matched": self.records_matched,
            "records_skipped": self.records_skipped,
            "matched_by_name": self.matched_by_name,
            "tasks_created": self.tasks_created,
            "tasks_updated": self.tasks_updated,
            "transitions_rejected": len(self.rejected),
            "dirty_ledgers": self.dirty_ledgers,
            "ledgers_written": len(self.written),
        }


class ReconciliationService:
    """Roster reconciliation service.

    For each record of a snapshot:
    1. Resolve the company (tax id, then normalized name); skip and count misses
    2. Load the company's ledger for the period (once per batch)
    3. Map every known column to a status and merge it into the ledger
    4. Leave tasks for columns absent from the record untouched

    Then write every changed ledger back whole. Re-running an unchanged
    snapshot writes nothing.
    """

    def __init__(
        self,
        store: LedgerStore,
        companies: Iterable[Company],
        *,
        column_map: Mapping[str, str] = COLUMN_TO_TEMPLATE,
        mapper: FieldMapper | None = None,
        guard: TransitionGuard | None = None,
        language: str = "uz",
        tax_id_column: str = TAX_ID_COLUMN,
        name_column: str = NAME_COLUMN,
    ):
        self.store = store
        self.matcher = CompanyMatcher(companies)
        self.mapper = mapper or FieldMapper()
        self.guard = guard
        self.language = language
        self.tax_id_column = normalize_header(tax_id_column)
        self.name_column = normalize_header(name_column)
        self.column_map = {normalize_header(col): key for col, key in column_map.items()}

    def run_reconciliation(
        self,
        records: Iterable[Mapping[str, str | None]],
        *,
        period: str,
        dry_run: bool = False,
        now: datetime | None = None,
    ) -> ReconciliationResult:
        """Merge a snapshot for one period into the stored ledgers.

        Args:
            records: Roster rows keyed by the export's column headers
            period: Period label ("2026-01", "2026 Yanvar", "2026 Yillik")
            dry_run: Compute the write-set without writing it

        Returns:
            ReconciliationResult with counts, changes and the write-set

        Raises:
            LedgerWriteError: If the store fails while writing
        """
        now = now or utcnow()
        period_key = period_storage_key(period)
        result = ReconciliationResult(period=period_key, dry_run=dry_run)
        loaded: dict[str, TaskLedger] = {}

        for row, raw_record in enumerate(records, start=1):
            result.records_processed += 1
            record = {normalize_header(k): v for k, v in raw_record.items() if k is not None}
            tax_id = str(record.get(self.tax_id_column) or "").strip()
            name = str(record.get(self.name_column) or "").strip()

            match = self.matcher.match(tax_id, name)
            if match is None:
                logger.warning(
                    "Skipping roster row %d: no company for tax id %r name %r",
                    row,
                    tax_id,
                    name,
                )
                result.skipped.append(SkippedRecord(row=row, tax_id=tax_id, name=name))
                continue

            result.records_matched += 1
            if match.matched_by is MatchedBy.NAME:
                result.matched_by_name += 1

            company = match.company
            ledger = loaded.get(company.id)
            if ledger is None:
                ledger = self.store.get_ledger(company.id, period_key)
                loaded[company.id] = ledger

            changes = self._merge_record(company, ledger, record, result, now)
            if changes:
                result.changes.extend(changes)
                result.write_set[(company.id, period_key)] = ledger

        if not dry_run:
            self._write(result)

        logger.info("Reconciliation finished: %s", result.summary())
        return result

    def _merge_record(
        self,
        company: Company,
        ledger: TaskLedger,
        record: Mapping[str, str | None],
        result: ReconciliationResult,
        now: datetime,
    ) -> list[TaskChange]:
        """Merge one record's columns into the ledger."""
        changes: list[TaskChange] = []
        for column, template_key in self.column_map.items():
            if column not in record:
                continue

            raw = record[column]
            raw_value = "" if raw is None else str(raw).strip()
            status = self.mapper.map_status(raw_value)
            template = TEMPLATES_BY_KEY.get(template_key)

            try:
                change = ledger.set_status(
                    template_key,
                    status,
                    raw_value,
                    source=TransitionSource.RECONCILIATION,
                    guard=self.guard,
                    template_name=template.display_name(self.language) if template else None,
                    assignee_name=company.accountant_name,
                    now=now,
                )
            except InvalidTransitionError as e:
                result.rejected.append(RejectedTransition(company.id, template_key, str(e)))
                continue

            if change is not None:
                changes.append(change)
        return changes

    def _write(self, result: ReconciliationResult) -> None:
        """Replace every dirty ledger in the store."""
        for (company_id, period), ledger in result.write_set.items():
            try:
                self.store.put_ledger(company_id, period, ledger)
            except Exception as e:
                logger.exception(
                    "Ledger write failed for company %s period %s", company_id, period
                )
                raise LedgerWriteError(company_id, period, result, e) from e
            result.written.append((company_id, period))
