"""Type definitions for the compensation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from filing_engine.types import Role


class PayRule(str, Enum):
    """Which step of the base pay cascade produced the amount."""

    FIXED_SUM = "fixed_sum"
    PERCENTAGE = "percentage"
    DEFAULT_PERCENTAGE = "default_percentage"
    NONE = "none"


class KpiInputType(str, Enum):
    """How a checklist indicator is recorded."""

    CHECKBOX = "checkbox"  # done / not done
    COUNTER = "counter"  # number of misses


class KpiOutcome(str, Enum):
    REWARD = "reward"
    PENALTY = "penalty"
    UNRECORDED = "unrecorded"


class AdjustmentType(str, Enum):
    """Manual payroll adjustment kinds."""

    BONUS = "bonus"
    AVANS = "avans"  # advance already paid out
    JARIMA = "jarima"  # fine
    MANUAL = "manual"
    OTHER = "other"


@dataclass(frozen=True)
class KpiRule:
    """Checklist rule: percentage points added or removed for one role."""

    name: str
    role: Role
    reward_percent: Decimal = Decimal("0")
    penalty_percent: Decimal = Decimal("0")  # Negative or zero
    input_type: KpiInputType = KpiInputType.CHECKBOX
    rule_id: str | None = None
    name_uz: str | None = None
    is_active: bool = True
    sort_order: int = 0

    @property
    def key(self) -> str:
        return self.rule_id or self.name


@dataclass(frozen=True)
class RuleOverride:
    """Company-specific reward/penalty; None keeps the rule's value."""

    reward_percent: Decimal | None = None
    penalty_percent: Decimal | None = None


@dataclass(frozen=True)
class KpiMetricSet:
    """Checklist indicator values for one company in one period."""

    company_id: str
    period: str
    values: Mapping[str, Any] = field(default_factory=dict)

    def get(self, indicator: str) -> Any:
        return self.values.get(indicator)


@dataclass(frozen=True)
class BasePay:
    """Result of the base pay cascade for one role."""

    amount: Decimal
    rule: PayRule
    percentage: Decimal | None = None


@dataclass(frozen=True)
class KpiDelta:
    """One rule's contribution, in percentage points."""

    rule_name: str
    outcome: KpiOutcome
    delta_percent: Decimal


@dataclass
class CompensationEntry:
    """Pay for one staff member in one role on one company."""

    staff_id: str | None
    staff_name: str | None
    company_id: str
    company_name: str
    role: Role
    base_amount: Decimal
    base_rule: PayRule
    kpi_delta_percent: Decimal
    kpi_bonus_amount: Decimal
    total: Decimal
    kpi_details: list[KpiDelta] = field(default_factory=list)

    @property
    def staff_key(self) -> str:
        """Key used to sum entries per staff member."""
        if self.staff_id:
            return self.staff_id
        return f"name:{(self.staff_name or '').strip().lower()}"


@dataclass(frozen=True)
class PayrollAdjustment:
    """Manual adjustment for a staff member in a period."""

    staff_id: str
    adjustment_type: AdjustmentType
    amount: Decimal
    reason: str | None = None

    @property
    def signed_amount(self) -> Decimal:
        """Advances and fines reduce pay, bonuses add to it."""
        if self.adjustment_type in (AdjustmentType.AVANS, AdjustmentType.JARIMA):
            return -abs(self.amount)
        if self.adjustment_type is AdjustmentType.BONUS:
            return abs(self.amount)
        return self.amount


@dataclass
class StaffPaySummary:
    """All of one staff member's entries for a period, summed."""

    staff_key: str
    staff_id: str | None
    staff_name: str | None
    company_ids: set[str] = field(default_factory=set)
    base_total: Decimal = Decimal("0")
    kpi_bonus: Decimal = Decimal("0")  # Positive
    kpi_penalty: Decimal = Decimal("0")  # Negative
    adjustments: Decimal = Decimal("0")

    @property
    def company_count(self) -> int:
        return len(self.company_ids)

    @property
    def total(self) -> Decimal:
        return self.base_total + self.kpi_bonus + self.kpi_penalty + self.adjustments


@dataclass
class PayrollLedger:
    """Compensation for every staff member in one period."""

    period: str
    entries: list[CompensationEntry] = field(default_factory=list)
    summaries: dict[str, StaffPaySummary] = field(default_factory=dict)

    @property
    def grand_total(self) -> Decimal:
        return sum((s.total for s in self.summaries.values()), Decimal("0"))

    def entries_for(self, staff_key: str) -> list[CompensationEntry]:
        return [e for e in self.entries if e.staff_key == staff_key]
