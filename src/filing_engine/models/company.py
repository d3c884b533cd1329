"""Company and staff directory models."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from filing_engine.models.base import Base, JsonType, TimestampMixin
from filing_engine.types import Company, Role, RoleAssignment, RoleShare, Staff


class CompanyRecord(Base, TimestampMixin):
    """Client company with contract shares and role assignments."""

    __tablename__ = "company"

    company_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    tax_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    contract_amount: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)

    accountant_id: Mapped[str | None] = mapped_column(String, nullable=True)
    accountant_name: Mapped[str | None] = mapped_column(String, nullable=True)
    accountant_percent: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)

    bank_client_id: Mapped[str | None] = mapped_column(String, nullable=True)
    bank_client_name: Mapped[str | None] = mapped_column(String, nullable=True)
    bank_client_percent: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)
    bank_client_sum: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)

    supervisor_id: Mapped[str | None] = mapped_column(String, nullable=True)
    supervisor_name: Mapped[str | None] = mapped_column(String, nullable=True)
    supervisor_percent: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)

    chief_accountant_id: Mapped[str | None] = mapped_column(String, nullable=True)
    chief_accountant_name: Mapped[str | None] = mapped_column(String, nullable=True)
    chief_accountant_percent: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)
    chief_accountant_sum: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)

    # Template keys enabled for this company; NULL or [] means all
    enabled_templates: Mapped[list[str] | None] = mapped_column(JsonType, nullable=True)

    def _role_columns(self, prefix: str) -> dict[str, Any]:
        return {
            "staff_id": getattr(self, f"{prefix}_id"),
            "staff_name": getattr(self, f"{prefix}_name"),
            "percentage": getattr(self, f"{prefix}_percent"),
            "fixed_sum": getattr(self, f"{prefix}_sum", None),
        }

    def to_domain(self) -> Company:
        """Build the engine-facing Company."""
        shares: dict[Role, RoleShare] = {}
        assignments: dict[Role, RoleAssignment] = {}
        for role in Role:
            cols = self._role_columns(role.value)
            shares[role] = RoleShare(percentage=cols["percentage"], fixed_sum=cols["fixed_sum"])
            assignments[role] = RoleAssignment(
                staff_id=cols["staff_id"], staff_name=cols["staff_name"]
            )

        return Company(
            id=self.company_id,
            name=self.name,
            tax_id=self.tax_id,
            is_active=self.is_active,
            contract_amount=self.contract_amount,
            shares=shares,
            assignments=assignments,
            enabled_templates=(
                frozenset(self.enabled_templates) if self.enabled_templates else None
            ),
        )


class StaffRecord(Base, TimestampMixin):
    """Staff member of the firm."""

    __tablename__ = "staff"

    staff_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_domain(self) -> Staff:
        return Staff(id=self.staff_id, name=self.name, role=self.role, is_active=self.is_active)
