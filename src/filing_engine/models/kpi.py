"""KPI rule, KPI metric and payroll adjustment models."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from filing_engine.models.base import Base, TimestampMixin


class KpiRuleRecord(Base, TimestampMixin):
    """Checklist rule: reward/penalty percentage points for one role."""

    __tablename__ = "kpi_rule"

    rule_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    name_uz: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False)
    reward_percent: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False, default=Decimal("0")
    )
    penalty_percent: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False, default=Decimal("0")
    )
    input_type: Mapped[str] = mapped_column(String, nullable=False, default="checkbox")
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("name", "role", name="kpi_rule_name_role_unique"),
        CheckConstraint(
            "role IN ('accountant', 'bank_client', 'supervisor', 'chief_accountant')",
            name="kpi_rule_role_check",
        ),
        CheckConstraint(
            "input_type IN ('checkbox', 'counter')",
            name="kpi_rule_input_type_check",
        ),
    )


class CompanyKpiRuleRecord(Base, TimestampMixin):
    """Per-company override of a rule's reward/penalty."""

    __tablename__ = "company_kpi_rule"

    company_kpi_rule_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[str] = mapped_column(String, nullable=False)
    rule_id: Mapped[str] = mapped_column(String, nullable=False)
    reward_percent: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    penalty_percent: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "rule_id", name="company_kpi_rule_unique"),
    )


class KpiMetricRecord(Base, TimestampMixin):
    """One checklist indicator value for a company in a period."""

    __tablename__ = "kpi_metric"

    kpi_metric_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[str] = mapped_column(String, nullable=False)
    period: Mapped[str] = mapped_column(String, nullable=False)
    indicator: Mapped[str] = mapped_column(String, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    recorded_by: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "period", "indicator", name="kpi_metric_unique"),
    )


class PayrollAdjustmentRecord(Base, TimestampMixin):
    """Manual bonus, advance or fine for a staff member in a period."""

    __tablename__ = "payroll_adjustment"

    payroll_adjustment_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    period: Mapped[str] = mapped_column(String, nullable=False)
    staff_id: Mapped[str] = mapped_column(String, nullable=False)
    adjustment_type: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    reason: Mapped[str | None] = mapped_column(String, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "adjustment_type IN ('bonus', 'avans', 'jarima', 'manual', 'other')",
            name="payroll_adjustment_type_check",
        ),
    )
