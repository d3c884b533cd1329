"""Reconciliation API endpoints."""

from fastapi import APIRouter, status
from sqlalchemy.orm import Session

from filing_engine.api.dependencies import AppSettings, DbSession
from filing_engine.api.schemas import (
    ErrorResponse,
    ReconciliationRequest,
    ReconciliationResponse,
    RejectedTransitionResponse,
    SkippedRecordResponse,
    TaskChangeResponse,
)
from filing_engine.services.directory import DirectoryRepository
from filing_engine.services.ledger_store import SqlLedgerStore
from filing_engine.services.reconciliation import ReconciliationResult, ReconciliationService
from filing_engine.services.state_machine import NoRegressionGuard

router = APIRouter(prefix="/reconciliations", tags=["reconciliations"])


@router.post(
    "",
    response_model=ReconciliationResponse,
    status_code=status.HTTP_200_OK,
    responses={500: {"model": ErrorResponse}},
)
async def run_reconciliation(
    db: DbSession,
    settings: AppSettings,
    payload: ReconciliationRequest,
) -> ReconciliationResponse:
    """Merge a roster snapshot into the stored ledgers for one period.

    The whole batch commits together; a failed ledger write rolls it back.
    """

    def reconcile(session: Session) -> ReconciliationResult:
        service = ReconciliationService(
            SqlLedgerStore(session),
            DirectoryRepository(session).list_companies(),
            guard=NoRegressionGuard() if payload.no_regression else None,
            language=settings.snapshot_language,
        )
        return service.run_reconciliation(
            payload.records,
            period=payload.period,
            dry_run=payload.dry_run,
        )

    result = await db.run_sync(reconcile)
    await db.commit()

    return ReconciliationResponse(
        period=result.period,
        dry_run=result.dry_run,
        records_processed=result.records_processed,
        records_matched=result.records_matched,
        records_skipped=result.records_skipped,
        matched_by_name=result.matched_by_name,
        tasks_created=result.tasks_created,
        tasks_updated=result.tasks_updated,
        dirty_ledgers=result.dirty_ledgers,
        ledgers_written=len(result.written),
        skipped=[SkippedRecordResponse.model_validate(s) for s in result.skipped],
        changes=[TaskChangeResponse.model_validate(c) for c in result.changes],
        rejected=[RejectedTransitionResponse.model_validate(r) for r in result.rejected],
    )
