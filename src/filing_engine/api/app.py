"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filing_engine.api.routes import (
    compensation_router,
    health_router,
    ledgers_router,
    reconciliations_router,
)
from filing_engine.config import get_settings
from filing_engine.database import init_db
from filing_engine.services.reconciliation import LedgerWriteError
from filing_engine.services.state_machine import InvalidTransitionError
from filing_engine.sync.snapshot import SnapshotFormatError
from filing_engine.templates import UnknownTemplateError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    engine, _ = init_db()
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="Filing Engine API",
        description="Filing obligation reconciliation and staff compensation",
        version=settings.engine_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(UnknownTemplateError)
    async def unknown_template_handler(
        request: Request, exc: UnknownTemplateError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "UNKNOWN_TEMPLATE"},
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "code": "INVALID_TRANSITION"},
        )

    @app.exception_handler(SnapshotFormatError)
    async def snapshot_format_handler(
        request: Request, exc: SnapshotFormatError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "code": "INVALID_SNAPSHOT"},
        )

    @app.exception_handler(LedgerWriteError)
    async def ledger_write_handler(
        request: Request, exc: LedgerWriteError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "code": "LEDGER_WRITE_FAILED"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(reconciliations_router, prefix="/api/v1")
    app.include_router(ledgers_router, prefix="/api/v1")
    app.include_router(compensation_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
