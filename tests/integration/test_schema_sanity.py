"""Schema sanity checks.

Validates that all tables and their uniqueness constraints exist.
"""

from decimal import Decimal

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from filing_engine.models import KpiMetricRecord, TaskLedgerRecord

pytestmark = pytest.mark.asyncio


async def _table_names(engine: AsyncEngine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda c: inspect(c).get_table_names()))


async def _unique_constraints(engine: AsyncEngine, table: str) -> set[str]:
    async with engine.connect() as conn:
        constraints = await conn.run_sync(lambda c: inspect(c).get_unique_constraints(table))
    return {uc["name"] for uc in constraints}


class TestTables:
    """Test that every table is created."""

    async def test_all_tables_exist(self, test_engine: AsyncEngine):
        tables = await _table_names(test_engine)
        assert {
            "company",
            "staff",
            "task_ledger",
            "kpi_rule",
            "company_kpi_rule",
            "kpi_metric",
            "payroll_adjustment",
        } <= tables


class TestUniqueConstraints:
    """Test that natural keys are unique."""

    async def test_one_ledger_per_company_period(self, test_engine: AsyncEngine):
        names = await _unique_constraints(test_engine, "task_ledger")
        assert "task_ledger_company_period_unique" in names

    async def test_one_metric_per_indicator(self, test_engine: AsyncEngine):
        names = await _unique_constraints(test_engine, "kpi_metric")
        assert "kpi_metric_unique" in names

    async def test_duplicate_ledger_rejected(self, seeded_db: AsyncSession):
        seeded_db.add_all([
            TaskLedgerRecord(company_id="c-alfa", period="2026-01", tasks=[]),
            TaskLedgerRecord(company_id="c-alfa", period="2026-01", tasks=[]),
        ])
        with pytest.raises(IntegrityError):
            await seeded_db.flush()
        await seeded_db.rollback()

    async def test_duplicate_metric_rejected(self, seeded_db: AsyncSession):
        seeded_db.add(
            KpiMetricRecord(
                company_id="c-alfa", period="2026-01", indicator="attendance", value=Decimal("0")
            )
        )
        with pytest.raises(IntegrityError):
            await seeded_db.flush()
        await seeded_db.rollback()
