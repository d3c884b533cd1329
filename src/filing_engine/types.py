"""Shared domain types for companies and staff."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class Role(str, Enum):
    """Contract roles a staff member can hold on a company."""

    ACCOUNTANT = "accountant"
    BANK_CLIENT = "bank_client"
    SUPERVISOR = "supervisor"
    CHIEF_ACCOUNTANT = "chief_accountant"


@dataclass(frozen=True)
class RoleShare:
    """A role's share of the contract.

    A fixed sum wins over a percentage. With neither set, the role falls back
    to its default percentage (see ``calculators.role_pay``).
    """

    percentage: Decimal | None = None
    fixed_sum: Decimal | None = None


@dataclass(frozen=True)
class RoleAssignment:
    """Reference to the staff member holding a role.

    Older records only carry a name, so ``staff_id`` is optional.
    """

    staff_id: str | None = None
    staff_name: str | None = None

    @property
    def is_assigned(self) -> bool:
        return bool(self.staff_id or (self.staff_name and self.staff_name.strip()))


@dataclass
class Company:
    """A client company as seen by the engines (read-only)."""

    id: str
    name: str
    tax_id: str | None = None
    is_active: bool = True
    contract_amount: Decimal | None = None
    shares: dict[Role, RoleShare] = field(default_factory=dict)
    assignments: dict[Role, RoleAssignment] = field(default_factory=dict)
    # None or empty means every template is enabled.
    enabled_templates: frozenset[str] | None = None

    def share_for(self, role: Role) -> RoleShare:
        return self.shares.get(role, RoleShare())

    def assignment_for(self, role: Role) -> RoleAssignment | None:
        assignment = self.assignments.get(role)
        if assignment is None or not assignment.is_assigned:
            return None
        return assignment

    def is_template_enabled(self, template_key: str) -> bool:
        """Check the enabled-templates convention for one template."""
        if not self.enabled_templates:
            return True
        return template_key in self.enabled_templates

    @property
    def accountant_name(self) -> str | None:
        assignment = self.assignment_for(Role.ACCOUNTANT)
        return assignment.staff_name if assignment else None


@dataclass(frozen=True)
class Staff:
    """A staff member of the firm."""

    id: str
    name: str
    role: str | None = None
    is_active: bool = True
