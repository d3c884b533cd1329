"""Translate free-text roster cells into task statuses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from filing_engine.services.state_machine import TaskStatus


@dataclass(frozen=True)
class MappingRule:
    """One row of the mapping table: predicate over the cleaned cell."""

    name: str
    matches: Callable[[str], bool]
    status: TaskStatus


DEFAULT_RULES: tuple[MappingRule, ...] = (
    MappingRule("accepted", lambda v: v.startswith("+") or v == "topshirildi", TaskStatus.APPROVED),
    MappingRule("not_required", lambda v: v in ("0", "not_required"), TaskStatus.NOT_REQUIRED),
    MappingRule("kartoteka", lambda v: v == "kartoteka", TaskStatus.BLOCKED),
    MappingRule(
        "application",
        lambda v: "ariza" in v or "ариза" in v or v == "in_progress",
        TaskStatus.PENDING_REVIEW,
    ),
    MappingRule("rejected", lambda v: v == "rad etildi", TaskStatus.REJECTED),
    MappingRule("not_submitted", lambda v: v in ("-", "?", ""), TaskStatus.NEW),
)


class FieldMapper:
    """Maps raw cell values to statuses.

    Rules are tried in order and the first match wins. The mapping is
    total: anything no rule recognizes maps to ``default``.
    """

    def __init__(
        self,
        rules: Sequence[MappingRule] = DEFAULT_RULES,
        default: TaskStatus = TaskStatus.NEW,
    ):
        self.rules = tuple(rules)
        self.default = default

    @staticmethod
    def clean(raw: Any) -> str:
        if raw is None:
            return ""
        return str(raw).strip().lower()

    def map_status(self, raw: Any) -> TaskStatus:
        value = self.clean(raw)
        for rule in self.rules:
            if rule.matches(value):
                return rule.status
        return self.default

    def extend(self, *rules: MappingRule) -> FieldMapper:
        """Return a mapper with extra rules tried before the built-in ones."""
        return FieldMapper(rules=(*rules, *self.rules), default=self.default)


_default_mapper = FieldMapper()


def map_status(raw: Any) -> TaskStatus:
    """Map one raw cell with the default rules."""
    return _default_mapper.map_status(raw)
