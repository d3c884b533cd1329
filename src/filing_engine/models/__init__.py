"""SQLAlchemy ORM models for the persistence store."""

from filing_engine.models.base import Base, TimestampMixin
from filing_engine.models.company import CompanyRecord, StaffRecord
from filing_engine.models.kpi import (
    CompanyKpiRuleRecord,
    KpiMetricRecord,
    KpiRuleRecord,
    PayrollAdjustmentRecord,
)
from filing_engine.models.operations import TaskLedgerRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "CompanyRecord",
    "StaffRecord",
    "TaskLedgerRecord",
    "KpiRuleRecord",
    "CompanyKpiRuleRecord",
    "KpiMetricRecord",
    "PayrollAdjustmentRecord",
]
