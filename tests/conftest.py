"""Pytest fixtures for filing engine tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from filing_engine.models import Base, CompanyRecord, StaffRecord
from filing_engine.types import Company, Role, RoleAssignment, RoleShare, Staff

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite://"

FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def staff() -> list[Staff]:
    """Staff members referenced by the test companies."""
    return [
        Staff(id="s-aziza", name="Aziza Karimova", role="accountant"),
        Staff(id="s-bobur", name="Bobur Aliyev", role="bank_client"),
        Staff(id="s-dilnoza", name="Dilnoza Rahimova", role="chief_accountant"),
    ]


@pytest.fixture
def alfa() -> Company:
    """Company with a tax id, an accountant on 20% and a fixed-sum bank client."""
    return Company(
        id="c-alfa",
        name='"Alfa Trade" MChJ',
        tax_id="123456789",
        contract_amount=Decimal("1000000"),
        shares={
            Role.ACCOUNTANT: RoleShare(percentage=Decimal("20")),
            Role.BANK_CLIENT: RoleShare(fixed_sum=Decimal("150000")),
        },
        assignments={
            Role.ACCOUNTANT: RoleAssignment(staff_id="s-aziza", staff_name="Aziza Karimova"),
            Role.BANK_CLIENT: RoleAssignment(staff_id="s-bobur", staff_name="Bobur Aliyev"),
            Role.CHIEF_ACCOUNTANT: RoleAssignment(
                staff_id="s-dilnoza", staff_name="Dilnoza Rahimova"
            ),
        },
    )


@pytest.fixture
def beta() -> Company:
    """Company without a usable tax id; only matchable by name."""
    return Company(
        id="c-beta",
        name="Beta Servis",
        tax_id="-",
        contract_amount=Decimal("500000"),
        shares={Role.ACCOUNTANT: RoleShare(percentage=Decimal("10"))},
        assignments={Role.ACCOUNTANT: RoleAssignment(staff_name="Aziza Karimova")},
    )


@pytest.fixture
def companies(alfa: Company, beta: Company) -> list[Company]:
    return [alfa, beta]


@pytest.fixture
def sync_engine() -> Generator[Engine, None, None]:
    """Create test database engine with all tables."""
    engine = create_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(sync_engine: Engine) -> Generator[Session, None, None]:
    """Create a database session for each test."""
    with Session(sync_engine, expire_on_commit=False) as session:
        yield session
        session.rollback()


@pytest.fixture
def seeded_db(db: Session) -> Session:
    """Session with the two test companies and their staff stored."""
    db.add_all([
        StaffRecord(staff_id="s-aziza", name="Aziza Karimova", role="accountant"),
        StaffRecord(staff_id="s-bobur", name="Bobur Aliyev", role="bank_client"),
        StaffRecord(staff_id="s-dilnoza", name="Dilnoza Rahimova", role="chief_accountant"),
        CompanyRecord(
            company_id="c-alfa",
            name='"Alfa Trade" MChJ',
            tax_id="123456789",
            contract_amount=Decimal("1000000"),
            accountant_id="s-aziza",
            accountant_name="Aziza Karimova",
            accountant_percent=Decimal("20"),
            bank_client_id="s-bobur",
            bank_client_name="Bobur Aliyev",
            bank_client_sum=Decimal("150000"),
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
        ),
    ])
    db.flush()
    return db
