"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from filing_engine.services.state_machine import TaskStatus


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: str | None = None


# ============================================================================
# Reconciliation schemas
# ============================================================================


class ReconciliationRequest(BaseModel):
    """Roster snapshot to merge into one period's ledgers.

    Numeric cells (tax ids, "0") arrive as JSON numbers and are read as text.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    period: str = Field(min_length=1)
    records: list[dict[str, str | None]]
    dry_run: bool = False
    no_regression: bool = False


class SkippedRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int
    tax_id: str
    name: str


class TaskChangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_id: str
    period: str
    template_key: str
    old_status: TaskStatus | None = None
    new_status: TaskStatus
    raw_value: str | None = None


class RejectedTransitionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_id: str
    template_key: str
    reason: str


class ReconciliationResponse(BaseModel):
    """Counts and per-task changes of one reconciliation batch."""

    period: str
    dry_run: bool
    records_processed: int
    records_matched: int
    records_skipped: int
    matched_by_name: int
    tasks_created: int
    tasks_updated: int
    dirty_ledgers: int
    ledgers_written: int
    skipped: list[SkippedRecordResponse]
    changes: list[TaskChangeResponse]
    rejected: list[RejectedTransitionResponse]


# ============================================================================
# Ledger schemas
# ============================================================================


class TaskResponse(BaseModel):
    """One operation task."""

    model_config = ConfigDict(from_attributes=True)

    task_id: str
    template_key: str
    status: TaskStatus
    raw_value: str | None = None
    template_name: str | None = None
    assignee_name: str | None = None
    comment: str | None = None
    created_at: datetime
    updated_at: datetime
    verified_at: datetime | None = None


class LedgerResponse(BaseModel):
    """All tasks of one company in one period."""

    company_id: str
    period: str
    updated_at: datetime | None = None
    tasks: list[TaskResponse]


class TaskStatusUpdate(BaseModel):
    """Manual status toggle."""

    status: TaskStatus
    comment: str | None = None


class TemplateToggle(BaseModel):
    """Enable or disable one template for a company's period."""

    enabled: bool


# ============================================================================
# Compensation schemas
# ============================================================================


class CompensationEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    staff_id: str | None = None
    staff_name: str | None = None
    company_id: str
    company_name: str
    role: str
    base_amount: Decimal
    base_rule: str
    kpi_delta_percent: Decimal
    kpi_bonus_amount: Decimal
    total: Decimal


class StaffPayResponse(BaseModel):
    """One staff member's period totals."""

    staff_key: str
    staff_id: str | None = None
    staff_name: str | None = None
    company_count: int
    base_total: Decimal
    kpi_bonus: Decimal
    kpi_penalty: Decimal
    adjustments: Decimal
    total: Decimal


class CompensationResponse(BaseModel):
    period: str
    grand_total: Decimal
    staff: list[StaffPayResponse]
    entries: list[CompensationEntryResponse]
