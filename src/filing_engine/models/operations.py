"""Task ledger persistence model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from filing_engine.models.base import Base, JsonType, TimestampMixin


class TaskLedgerRecord(Base, TimestampMixin):
    """One company's tasks for one period, stored as a single row.

    The tasks column is always replaced as a whole.
    """

    __tablename__ = "task_ledger"

    task_ledger_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("company.company_id", ondelete="CASCADE"),
        nullable=False,
    )
    period: Mapped[str] = mapped_column(String, nullable=False)
    tasks: Mapped[list[dict[str, Any]]] = mapped_column(JsonType, nullable=False, default=list)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "period", name="task_ledger_company_period_unique"),
    )
