"""Base pay resolution for contract roles."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Mapping

from filing_engine.calculators.types import BasePay, PayRule
from filing_engine.types import Company, Role, RoleShare

HUNDRED = Decimal("100")
ZERO = Decimal("0")

# Used when a role has neither a fixed sum nor a percentage of its own.
DEFAULT_ROLE_PERCENTAGES: dict[Role, Decimal] = {
    Role.CHIEF_ACCOUNTANT: Decimal("7"),
}


def fixed_sum_rule(contract: Decimal, share: RoleShare, default: Decimal | None) -> BasePay | None:
    """A positive fixed sum is paid as-is."""
    if share.fixed_sum:
        return BasePay(amount=Decimal(share.fixed_sum), rule=PayRule.FIXED_SUM)
    return None


def percentage_rule(contract: Decimal, share: RoleShare, default: Decimal | None) -> BasePay | None:
    """An explicit percentage of the contract (an explicit 0 pays nothing)."""
    if share.percentage is None:
        return None
    percentage = Decimal(share.percentage)
    return BasePay(
        amount=contract * percentage / HUNDRED,
        rule=PayRule.PERCENTAGE,
        percentage=percentage,
    )


def default_percentage_rule(
    contract: Decimal, share: RoleShare, default: Decimal | None
) -> BasePay | None:
    """The role's default percentage of the contract."""
    if not default:
        return None
    return BasePay(
        amount=contract * default / HUNDRED,
        rule=PayRule.DEFAULT_PERCENTAGE,
        percentage=default,
    )


PayRuleFn = Callable[[Decimal, RoleShare, Decimal | None], BasePay | None]

# Tried in order; the first rule that applies wins.
PAY_CASCADE: tuple[PayRuleFn, ...] = (
    fixed_sum_rule,
    percentage_rule,
    default_percentage_rule,
)


def resolve_base_pay(
    contract_amount: Decimal | None,
    share: RoleShare,
    default_percentage: Decimal | None = None,
) -> BasePay:
    """Run the cascade; missing inputs count as zero."""
    contract = Decimal(contract_amount) if contract_amount else ZERO
    for rule in PAY_CASCADE:
        result = rule(contract, share, default_percentage)
        if result is not None:
            return result
    return BasePay(amount=ZERO, rule=PayRule.NONE)


class RolePayResolver:
    """Resolves base pay per role of a company.

    Cascade per role:
    1. Fixed sum, if set
    2. The role's own percentage of the contract, if set
    3. The role's default percentage of the contract
    4. Nothing (zero)
    """

    def __init__(self, default_percentages: Mapping[Role, Decimal] | None = None):
        self.default_percentages = dict(
            DEFAULT_ROLE_PERCENTAGES if default_percentages is None else default_percentages
        )

    def resolve(self, company: Company, role: Role) -> BasePay:
        return resolve_base_pay(
            company.contract_amount,
            company.share_for(role),
            self.default_percentages.get(role),
        )
