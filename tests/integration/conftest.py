"""Integration test fixtures with a real (in-memory) database."""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from filing_engine.api.app import create_app
from filing_engine.api.dependencies import get_db_session
from filing_engine.models import (
    Base,
    CompanyRecord,
    KpiMetricRecord,
    KpiRuleRecord,
    PayrollAdjustmentRecord,
    StaffRecord,
)

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def seeded_db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Two companies, their staff, one KPI rule and January metrics."""
    async with session_factory() as session:
        session.add_all([
            StaffRecord(staff_id="s-aziza", name="Aziza Karimova", role="accountant"),
            StaffRecord(staff_id="s-dilnoza", name="Dilnoza Rahimova", role="chief_accountant"),
            CompanyRecord(
                company_id="c-alfa",
                name='"Alfa Trade" MChJ',
                tax_id="123456789",
                contract_amount=Decimal("1000000"),
                accountant_id="s-aziza",
                accountant_name="Aziza Karimova",
                accountant_percent=Decimal("20"),
                chief_accountant_id="s-dilnoza",
                chief_accountant_name="Dilnoza Rahimova",
            ),
            CompanyRecord(
                company_id="c-beta",
                name="Beta Servis",
                tax_id="-",
                contract_amount=Decimal("500000"),
                accountant_name="Aziza Karimova",
                accountant_percent=Decimal("10"),
                is_active=False,
            ),
            KpiRuleRecord(
                rule_id="r-attendance",
                name="attendance",
                role="accountant",
                reward_percent=Decimal("1"),
                penalty_percent=Decimal("-1"),
            ),
            KpiMetricRecord(
                company_id="c-alfa", period="2026-01", indicator="attendance", value=Decimal("1")
            ),
            PayrollAdjustmentRecord(
                period="2026-01",
                staff_id="s-dilnoza",
                adjustment_type="avans",
                amount=Decimal("20000"),
            ),
        ])
        await session.commit()
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client bound to the test database."""
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
