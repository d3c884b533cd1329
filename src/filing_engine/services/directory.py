"""Read engine inputs (companies, staff, KPI data) from the store."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from filing_engine.calculators.types import (
    AdjustmentType,
    KpiInputType,
    KpiMetricSet,
    KpiRule,
    PayrollAdjustment,
    RuleOverride,
)
from filing_engine.models import (
    CompanyKpiRuleRecord,
    CompanyRecord,
    KpiMetricRecord,
    KpiRuleRecord,
    PayrollAdjustmentRecord,
    StaffRecord,
)
from filing_engine.periods import period_storage_key
from filing_engine.types import Company, Role, Staff


class DirectoryRepository:
    """Loads read-only inputs for both engines."""

    def __init__(self, session: Session):
        self.session = session

    def list_companies(self, *, active_only: bool = False) -> list[Company]:
        query = select(CompanyRecord).order_by(CompanyRecord.created_at, CompanyRecord.company_id)
        if active_only:
            query = query.where(CompanyRecord.is_active.is_(True))
        return [r.to_domain() for r in self.session.execute(query).scalars()]

    def list_staff(self) -> list[Staff]:
        query = select(StaffRecord).order_by(StaffRecord.name)
        return [r.to_domain() for r in self.session.execute(query).scalars()]

    def list_kpi_rules(self) -> list[KpiRule]:
        query = select(KpiRuleRecord).order_by(KpiRuleRecord.sort_order, KpiRuleRecord.name)
        return [
            KpiRule(
                name=r.name,
                role=Role(r.role),
                reward_percent=Decimal(r.reward_percent),
                penalty_percent=Decimal(r.penalty_percent),
                input_type=KpiInputType(r.input_type),
                rule_id=r.rule_id,
                name_uz=r.name_uz,
                is_active=r.is_active,
                sort_order=r.sort_order,
            )
            for r in self.session.execute(query).scalars()
        ]

    def list_rule_overrides(self) -> dict[tuple[str, str], RuleOverride]:
        records = self.session.execute(select(CompanyKpiRuleRecord)).scalars()
        return {
            (r.company_id, r.rule_id): RuleOverride(
                reward_percent=r.reward_percent,
                penalty_percent=r.penalty_percent,
            )
            for r in records
        }

    def metrics_for_period(self, period: str) -> dict[str, KpiMetricSet]:
        """KPI metric sets for every company with values in the period."""
        period_key = period_storage_key(period)
        records = self.session.execute(
            select(KpiMetricRecord).where(KpiMetricRecord.period == period_key)
        ).scalars()

        values: dict[str, dict[str, Decimal]] = {}
        for r in records:
            values.setdefault(r.company_id, {})[r.indicator] = r.value
        return {
            company_id: KpiMetricSet(company_id=company_id, period=period_key, values=vals)
            for company_id, vals in values.items()
        }

    def adjustments_for_period(self, period: str) -> list[PayrollAdjustment]:
        period_key = period_storage_key(period)
        records = self.session.execute(
            select(PayrollAdjustmentRecord).where(
                PayrollAdjustmentRecord.period == period_key,
                PayrollAdjustmentRecord.is_approved.is_(True),
            )
        ).scalars()
        return [
            PayrollAdjustment(
                staff_id=r.staff_id,
                adjustment_type=AdjustmentType(r.adjustment_type),
                amount=Decimal(r.amount),
                reason=r.reason,
            )
            for r in records
        ]
