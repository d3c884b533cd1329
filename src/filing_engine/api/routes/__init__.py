"""API routes."""

from filing_engine.api.routes.compensation import router as compensation_router
from filing_engine.api.routes.health import router as health_router
from filing_engine.api.routes.ledgers import router as ledgers_router
from filing_engine.api.routes.reconciliations import router as reconciliations_router

__all__ = [
    "compensation_router",
    "health_router",
    "ledgers_router",
    "reconciliations_router",
]
