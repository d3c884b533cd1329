"""KPI checklist deltas in percentage points."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from filing_engine.calculators.types import (
    KpiDelta,
    KpiInputType,
    KpiMetricSet,
    KpiOutcome,
    KpiRule,
    RuleOverride,
)
from filing_engine.types import Role

ZERO = Decimal("0")


def _as_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return Decimal(int(value))
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def evaluate_rule(rule: KpiRule, value: Any) -> KpiDelta:
    """One rule's contribution for one recorded indicator value.

    Checkbox: a true (or positive) value earns the reward, anything else the
    penalty. Counter: zero occurrences earn the reward, otherwise the
    penalty applies once per occurrence. Unrecorded or unreadable values
    contribute nothing.
    """
    if value is None:
        return KpiDelta(rule.name, KpiOutcome.UNRECORDED, ZERO)
    number = _as_decimal(value)
    if number is None:
        return KpiDelta(rule.name, KpiOutcome.UNRECORDED, ZERO)

    if rule.input_type is KpiInputType.COUNTER:
        if number <= 0:
            return KpiDelta(rule.name, KpiOutcome.REWARD, rule.reward_percent)
        return KpiDelta(rule.name, KpiOutcome.PENALTY, rule.penalty_percent * number)

    if number > 0:
        return KpiDelta(rule.name, KpiOutcome.REWARD, rule.reward_percent)
    return KpiDelta(rule.name, KpiOutcome.PENALTY, rule.penalty_percent)


class KpiCalculator:
    """Computes a role's KPI delta from the rule table and a metric set."""

    def __init__(
        self,
        rules: Iterable[KpiRule],
        overrides: Mapping[tuple[str, str], RuleOverride] | None = None,
    ):
        self.rules = tuple(sorted(rules, key=lambda r: (r.sort_order, r.name)))
        # (company_id, rule key) -> override
        self.overrides = dict(overrides or {})

    def rules_for(self, role: Role, company_id: str) -> list[KpiRule]:
        """Active rules for a role with the company's overrides applied."""
        result: list[KpiRule] = []
        for rule in self.rules:
            if not rule.is_active or rule.role is not role:
                continue
            override = self.overrides.get((company_id, rule.key))
            if override is not None:
                rule = replace(
                    rule,
                    reward_percent=(
                        rule.reward_percent
                        if override.reward_percent is None
                        else override.reward_percent
                    ),
                    penalty_percent=(
                        rule.penalty_percent
                        if override.penalty_percent is None
                        else override.penalty_percent
                    ),
                )
            result.append(rule)
        return result

    def delta_for(
        self,
        role: Role,
        company_id: str,
        metrics: KpiMetricSet | None,
    ) -> tuple[Decimal, list[KpiDelta]]:
        """Total percentage points and the per-rule breakdown."""
        details: list[KpiDelta] = []
        total = ZERO
        for rule in self.rules_for(role, company_id):
            value = metrics.get(rule.name) if metrics is not None else None
            delta = evaluate_rule(rule, value)
            details.append(delta)
            total += delta.delta_percent
        return total, details
