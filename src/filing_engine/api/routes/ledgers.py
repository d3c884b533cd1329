"""Task ledger API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status
from sqlalchemy.orm import Session

from filing_engine.api.dependencies import AppSettings, DbSession
from filing_engine.api.schemas import (
    ErrorResponse,
    LedgerResponse,
    TaskResponse,
    TaskStatusUpdate,
    TemplateToggle,
)
from filing_engine.models import CompanyRecord
from filing_engine.services.ledger_store import SqlLedgerStore
from filing_engine.services.task_ledger import OperationTask, TaskLedger
from filing_engine.services.task_service import TaskService

router = APIRouter(prefix="/ledgers", tags=["ledgers"])

CompanyId = Annotated[str, Path(min_length=1)]
PeriodLabel = Annotated[str, Path(min_length=1)]


async def _require_company(db: DbSession, company_id: str) -> None:
    if await db.get(CompanyRecord, company_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found",
        )


def _ledger_response(ledger: TaskLedger) -> LedgerResponse:
    return LedgerResponse(
        company_id=ledger.company_id,
        period=ledger.period,
        updated_at=ledger.updated_at,
        tasks=[TaskResponse.model_validate(task) for task in ledger],
    )


@router.get(
    "/{company_id}/{period}",
    response_model=LedgerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_ledger(
    db: DbSession,
    company_id: CompanyId,
    period: PeriodLabel,
) -> LedgerResponse:
    """Get all tasks of a company for a period (empty if none stored)."""
    await _require_company(db, company_id)
    ledger = await db.run_sync(
        lambda session: TaskService(SqlLedgerStore(session)).get_ledger(company_id, period)
    )
    return _ledger_response(ledger)


@router.put(
    "/{company_id}/{period}/tasks/{template_key}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def set_task_status(
    db: DbSession,
    settings: AppSettings,
    company_id: CompanyId,
    period: PeriodLabel,
    template_key: Annotated[str, Path(min_length=1)],
    payload: TaskStatusUpdate,
) -> TaskResponse:
    """Set one task's status by hand."""
    await _require_company(db, company_id)

    def update(session: Session) -> OperationTask | None:
        service = TaskService(SqlLedgerStore(session), language=settings.snapshot_language)
        service.set_task_status(
            company_id, period, template_key, payload.status, comment=payload.comment
        )
        return service.get_ledger(company_id, period).get(template_key)

    task = await db.run_sync(update)
    await db.commit()
    return TaskResponse.model_validate(task)


@router.put(
    "/{company_id}/{period}/templates/{template_key}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_template_enabled(
    db: DbSession,
    settings: AppSettings,
    company_id: CompanyId,
    period: PeriodLabel,
    template_key: Annotated[str, Path(min_length=1)],
    payload: TemplateToggle,
) -> TaskResponse:
    """Enable (task back to new) or disable (task not_required) a template."""
    await _require_company(db, company_id)

    def toggle(session: Session) -> OperationTask | None:
        service = TaskService(SqlLedgerStore(session), language=settings.snapshot_language)
        service.set_template_enabled(company_id, period, template_key, payload.enabled)
        return service.get_ledger(company_id, period).get(template_key)

    task = await db.run_sync(toggle)
    await db.commit()
    return TaskResponse.model_validate(task)
