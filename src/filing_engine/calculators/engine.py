"""Compensation engine - staff pay from contract shares and KPI checklists."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

from filing_engine.calculators.kpi_calculator import KpiCalculator
from filing_engine.calculators.role_pay import HUNDRED, RolePayResolver
from filing_engine.calculators.types import (
    CompensationEntry,
    KpiMetricSet,
    KpiRule,
    PayrollAdjustment,
    PayrollLedger,
    RuleOverride,
    StaffPaySummary,
)
from filing_engine.types import Company, Role, RoleAssignment, Staff

OUTPUT_PRECISION = Decimal("0.01")


def round_amount(amount: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


class CompensationEngine:
    """Derives per-staff pay from company contracts and KPI metrics.

    Per company, for each assigned role (stable order):
    1) Base pay from the role pay cascade (fixed sum, percentage, default)
    2) KPI delta in percentage points from the role's checklist rules
    3) KPI amount = contract * delta / 100
    4) Total = base + KPI amount

    The engine only reads its inputs; nothing is written anywhere.
    """

    ROLE_ORDER = (
        Role.ACCOUNTANT,
        Role.BANK_CLIENT,
        Role.CHIEF_ACCOUNTANT,
        Role.SUPERVISOR,
    )

    def __init__(
        self,
        rules: Iterable[KpiRule] = (),
        *,
        overrides: Mapping[tuple[str, str], RuleOverride] | None = None,
        default_percentages: Mapping[Role, Decimal] | None = None,
    ):
        self.kpi = KpiCalculator(rules, overrides)
        self.role_pay = RolePayResolver(default_percentages)

    def calculate_company(
        self,
        company: Company,
        staff: Iterable[Staff] = (),
        metrics: KpiMetricSet | None = None,
    ) -> list[CompensationEntry]:
        """Compensation entries for every assigned role of one company."""
        directory = _StaffDirectory(staff)
        return self._calculate_company(company, directory, metrics)

    def calculate_period(
        self,
        period: str,
        companies: Iterable[Company],
        staff: Iterable[Staff] = (),
        metrics: Mapping[str, KpiMetricSet] | None = None,
        adjustments: Iterable[PayrollAdjustment] = (),
        *,
        include_inactive: bool = False,
    ) -> PayrollLedger:
        """Entries for all companies, summed per staff member."""
        directory = _StaffDirectory(staff)
        metrics = metrics or {}
        ledger = PayrollLedger(period=period)

        for company in companies:
            if not company.is_active and not include_inactive:
                continue
            entries = self._calculate_company(company, directory, metrics.get(company.id))
            ledger.entries.extend(entries)

        for entry in ledger.entries:
            summary = ledger.summaries.get(entry.staff_key)
            if summary is None:
                summary = StaffPaySummary(
                    staff_key=entry.staff_key,
                    staff_id=entry.staff_id,
                    staff_name=entry.staff_name,
                )
                ledger.summaries[entry.staff_key] = summary
            summary.company_ids.add(entry.company_id)
            summary.base_total += entry.base_amount
            if entry.kpi_bonus_amount >= 0:
                summary.kpi_bonus += entry.kpi_bonus_amount
            else:
                summary.kpi_penalty += entry.kpi_bonus_amount

        for adjustment in adjustments:
            summary = ledger.summaries.get(adjustment.staff_id)
            if summary is None:
                member = directory.by_id.get(adjustment.staff_id)
                summary = StaffPaySummary(
                    staff_key=adjustment.staff_id,
                    staff_id=adjustment.staff_id,
                    staff_name=member.name if member else None,
                )
                ledger.summaries[adjustment.staff_id] = summary
            summary.adjustments += adjustment.signed_amount

        return ledger

    def _calculate_company(
        self,
        company: Company,
        directory: _StaffDirectory,
        metrics: KpiMetricSet | None,
    ) -> list[CompensationEntry]:
        entries: list[CompensationEntry] = []
        contract = Decimal(company.contract_amount) if company.contract_amount else Decimal("0")

        for role in self.ROLE_ORDER:
            assignment = company.assignment_for(role)
            if assignment is None:
                continue

            staff_id, staff_name = directory.resolve(assignment)
            base = self.role_pay.resolve(company, role)
            delta_percent, details = self.kpi.delta_for(role, company.id, metrics)
            kpi_amount = round_amount(contract * delta_percent / HUNDRED)
            base_amount = round_amount(base.amount)

            entries.append(
                CompensationEntry(
                    staff_id=staff_id,
                    staff_name=staff_name,
                    company_id=company.id,
                    company_name=company.name,
                    role=role,
                    base_amount=base_amount,
                    base_rule=base.rule,
                    kpi_delta_percent=delta_percent,
                    kpi_bonus_amount=kpi_amount,
                    total=base_amount + kpi_amount,
                    kpi_details=details,
                )
            )
        return entries


class _StaffDirectory:
    """Staff lookup by id, falling back to a case-insensitive name."""

    def __init__(self, staff: Iterable[Staff]):
        self.by_id: dict[str, Staff] = {}
        self.by_name: dict[str, Staff] = {}
        for member in staff:
            self.by_id[member.id] = member
            self.by_name.setdefault(member.name.strip().lower(), member)

    def resolve(self, assignment: RoleAssignment) -> tuple[str | None, str | None]:
        if assignment.staff_id:
            member = self.by_id.get(assignment.staff_id)
            if member is not None:
                return member.id, member.name
            return assignment.staff_id, assignment.staff_name
        name = (assignment.staff_name or "").strip()
        member = self.by_name.get(name.lower())
        if member is not None:
            return member.id, member.name
        return None, name or None
