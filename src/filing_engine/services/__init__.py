"""Filing engine services."""

from filing_engine.services.ledger_store import InMemoryLedgerStore, LedgerStore, SqlLedgerStore
from filing_engine.services.state_machine import (
    InvalidTransitionError,
    NoRegressionGuard,
    TaskStateMachine,
    TaskStatus,
)
from filing_engine.services.task_ledger import OperationTask, TaskChange, TaskLedger

__all__ = [
    "InMemoryLedgerStore",
    "InvalidTransitionError",
    "LedgerStore",
    "NoRegressionGuard",
    "OperationTask",
    "SqlLedgerStore",
    "TaskChange",
    "TaskLedger",
    "TaskStateMachine",
    "TaskStatus",
]
