"""Compensation API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query
from sqlalchemy.orm import Session

from filing_engine.api.dependencies import AppSettings, DbSession
from filing_engine.api.schemas import (
    CompensationEntryResponse,
    CompensationResponse,
    StaffPayResponse,
)
from filing_engine.calculators import CompensationEngine
from filing_engine.calculators.types import PayrollLedger
from filing_engine.periods import period_storage_key
from filing_engine.services.directory import DirectoryRepository
from filing_engine.types import Role

router = APIRouter(prefix="/compensation", tags=["compensation"])


@router.get("", response_model=CompensationResponse)
async def get_compensation(
    db: DbSession,
    settings: AppSettings,
    period: Annotated[str, Query(min_length=1)],
    include_inactive: bool = False,
) -> CompensationResponse:
    """Calculate staff compensation for a period. Nothing is persisted."""
    period_key = period_storage_key(period)

    def calculate(session: Session) -> PayrollLedger:
        directory = DirectoryRepository(session)
        engine = CompensationEngine(
            directory.list_kpi_rules(),
            overrides=directory.list_rule_overrides(),
            default_percentages={Role.CHIEF_ACCOUNTANT: settings.chief_accountant_percent},
        )
        return engine.calculate_period(
            period_key,
            directory.list_companies(),
            directory.list_staff(),
            metrics=directory.metrics_for_period(period_key),
            adjustments=directory.adjustments_for_period(period_key),
            include_inactive=include_inactive,
        )

    ledger = await db.run_sync(calculate)

    return CompensationResponse(
        period=ledger.period,
        grand_total=ledger.grand_total,
        staff=[
            StaffPayResponse(
                staff_key=s.staff_key,
                staff_id=s.staff_id,
                staff_name=s.staff_name,
                company_count=s.company_count,
                base_total=s.base_total,
                kpi_bonus=s.kpi_bonus,
                kpi_penalty=s.kpi_penalty,
                adjustments=s.adjustments,
                total=s.total,
            )
            for s in ledger.summaries.values()
        ],
        entries=[
            CompensationEntryResponse(
                staff_id=e.staff_id,
                staff_name=e.staff_name,
                company_id=e.company_id,
                company_name=e.company_name,
                role=e.role.value,
                base_amount=e.base_amount,
                base_rule=e.base_rule.value,
                kpi_delta_percent=e.kpi_delta_percent,
                kpi_bonus_amount=e.kpi_bonus_amount,
                total=e.total,
            )
            for e in ledger.entries
        ],
    )
