"""Compensation calculation engine."""

from filing_engine.calculators.engine import CompensationEngine
from filing_engine.calculators.kpi_calculator import KpiCalculator
from filing_engine.calculators.role_pay import RolePayResolver, resolve_base_pay

__all__ = [
    "CompensationEngine",
    "KpiCalculator",
    "RolePayResolver",
    "resolve_base_pay",
]
