"""Tests for KPI checklist deltas."""

from decimal import Decimal

import pytest

from filing_engine.calculators.kpi_calculator import KpiCalculator, evaluate_rule
from filing_engine.calculators.types import (
    KpiInputType,
    KpiMetricSet,
    KpiOutcome,
    KpiRule,
    RuleOverride,
)
from filing_engine.types import Role


@pytest.fixture
def rules() -> list[KpiRule]:
    return [
        KpiRule("attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"), sort_order=1),
        KpiRule("one_c", Role.ACCOUNTANT, Decimal("1"), Decimal("0"), sort_order=2),
        KpiRule("telegram_ok", Role.ACCOUNTANT, Decimal("0"), Decimal("-1"), sort_order=3),
        KpiRule(
            "missed_messages",
            Role.ACCOUNTANT,
            Decimal("0.5"),
            Decimal("-0.25"),
            input_type=KpiInputType.COUNTER,
            sort_order=4,
        ),
        KpiRule("bank_on_time", Role.BANK_CLIENT, Decimal("2"), Decimal("-2")),
    ]


def _metrics(**values) -> KpiMetricSet:
    return KpiMetricSet(company_id="c-alfa", period="2026-01", values=values)


class TestEvaluateRule:
    """Test a single rule against a recorded value."""

    def test_checkbox(self):
        rule = KpiRule("attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"))
        assert evaluate_rule(rule, True).delta_percent == Decimal("1")
        assert evaluate_rule(rule, 1).outcome is KpiOutcome.REWARD
        assert evaluate_rule(rule, False).delta_percent == Decimal("-1")
        assert evaluate_rule(rule, 0).outcome is KpiOutcome.PENALTY

    def test_counter_applies_penalty_per_occurrence(self):
        rule = KpiRule(
            "missed", Role.ACCOUNTANT, Decimal("1"), Decimal("-0.5"),
            input_type=KpiInputType.COUNTER,
        )
        assert evaluate_rule(rule, 0).delta_percent == Decimal("1")
        assert evaluate_rule(rule, 3).delta_percent == Decimal("-1.5")

    def test_unrecorded_contributes_nothing(self):
        rule = KpiRule("attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"))
        delta = evaluate_rule(rule, None)
        assert delta.outcome is KpiOutcome.UNRECORDED
        assert delta.delta_percent == 0

    def test_unreadable_value_contributes_nothing(self):
        rule = KpiRule("attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"))
        assert evaluate_rule(rule, "n/a").outcome is KpiOutcome.UNRECORDED

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "-Infinity", "NaN"])
    def test_non_finite_value_contributes_nothing(self, value):
        checkbox = KpiRule("attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"))
        counter = KpiRule(
            "missed", Role.ACCOUNTANT, Decimal("1"), Decimal("-0.5"),
            input_type=KpiInputType.COUNTER,
        )
        for rule in (checkbox, counter):
            delta = evaluate_rule(rule, value)
            assert delta.outcome is KpiOutcome.UNRECORDED
            assert delta.delta_percent == 0


class TestKpiCalculator:
    """Test role deltas over the rule table."""

    def test_all_satisfied(self, rules):
        total, details = KpiCalculator(rules).delta_for(
            Role.ACCOUNTANT,
            "c-alfa",
            _metrics(attendance=1, one_c=1, telegram_ok=1, missed_messages=0),
        )
        assert total == Decimal("2.5")
        assert [d.rule_name for d in details] == [
            "attendance", "one_c", "telegram_ok", "missed_messages",
        ]

    def test_penalty_only_rule(self, rules):
        total, _ = KpiCalculator(rules).delta_for(
            Role.ACCOUNTANT,
            "c-alfa",
            _metrics(attendance=1, one_c=1, telegram_ok=0, missed_messages=2),
        )
        assert total == Decimal("0.5")

    def test_rules_only_apply_to_their_role(self, rules):
        total, details = KpiCalculator(rules).delta_for(
            Role.BANK_CLIENT, "c-alfa", _metrics(bank_on_time=1, attendance=0)
        )
        assert total == Decimal("2")
        assert len(details) == 1

    def test_no_metrics(self, rules):
        total, details = KpiCalculator(rules).delta_for(Role.ACCOUNTANT, "c-alfa", None)
        assert total == 0
        assert all(d.outcome is KpiOutcome.UNRECORDED for d in details)

    def test_inactive_rules_are_skipped(self):
        rule = KpiRule("attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"), is_active=False)
        total, details = KpiCalculator([rule]).delta_for(
            Role.ACCOUNTANT, "c-alfa", _metrics(attendance=1)
        )
        assert total == 0
        assert details == []

    def test_company_override(self):
        rule = KpiRule(
            "attendance", Role.ACCOUNTANT, Decimal("1"), Decimal("-1"), rule_id="r-attendance"
        )
        calculator = KpiCalculator(
            [rule],
            {("c-alfa", "r-attendance"): RuleOverride(reward_percent=Decimal("3"))},
        )

        alfa_total, _ = calculator.delta_for(Role.ACCOUNTANT, "c-alfa", _metrics(attendance=1))
        beta_total, _ = calculator.delta_for(Role.ACCOUNTANT, "c-beta", _metrics(attendance=1))
        alfa_penalty, _ = calculator.delta_for(Role.ACCOUNTANT, "c-alfa", _metrics(attendance=0))

        assert alfa_total == Decimal("3")
        assert beta_total == Decimal("1")
        # Penalty not overridden
        assert alfa_penalty == Decimal("-1")
