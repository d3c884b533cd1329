"""Period label normalization.

Period labels are entered by people ("2026 Yanvar", "2026 Yillik") or by
systems ("2026-01"). Month labels normalize to a canonical ``YYYY-MM`` key;
anything else, including annual markers, normalizes to the empty sentinel
and is compared by its raw label instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

MONTHS_UZ: tuple[str, ...] = (
    "Yanvar",
    "Fevral",
    "Mart",
    "Aprel",
    "May",
    "Iyun",
    "Iyul",
    "Avgust",
    "Sentyabr",
    "Oktyabr",
    "Noyabr",
    "Dekabr",
)

ANNUAL_MARKER = "Yillik"

# Returned when a label has no month-comparable key.
EMPTY_KEY = ""

_CANONICAL_RE = re.compile(r"\d{4}-(0[1-9]|1[0-2])")
_YEAR_RE = re.compile(r"\d{4}")
_MONTH_INDEX = {name.lower(): index for index, name in enumerate(MONTHS_UZ)}


def normalize_period(label: str | None) -> str:
    """Return the canonical ``YYYY-MM`` key for a label, or ``EMPTY_KEY``."""
    if not label:
        return EMPTY_KEY
    if _CANONICAL_RE.fullmatch(label.strip()):
        return label.strip()

    tokens = label.split()
    if len(tokens) < 2 or not _YEAR_RE.fullmatch(tokens[0]):
        return EMPTY_KEY

    month_index = _MONTH_INDEX.get(" ".join(tokens[1:]).lower())
    if month_index is None:
        return EMPTY_KEY
    return f"{tokens[0]}-{month_index + 1:02d}"


def periods_equal(left: str, right: str) -> bool:
    """Compare two labels by canonical key, falling back to the raw labels."""
    left_key = normalize_period(left)
    right_key = normalize_period(right)
    if left_key and right_key:
        return left_key == right_key
    return left == right


def period_storage_key(label: str) -> str:
    """Key under which a period's ledgers are stored."""
    return normalize_period(label) or label


def is_annual(label: str) -> bool:
    """Check whether a label is an annual aggregate marker ("2026 Yillik")."""
    tokens = label.split()
    return (
        len(tokens) == 2
        and bool(_YEAR_RE.fullmatch(tokens[0]))
        and tokens[1].lower() == ANNUAL_MARKER.lower()
    )


def format_period(key: str) -> str:
    """Render a canonical key as a month label ("2026-01" -> "2026 Yanvar")."""
    if not _CANONICAL_RE.fullmatch(key):
        return key
    year, month = key.split("-")
    return f"{year} {MONTHS_UZ[int(month) - 1]}"


def current_period(today: date | None = None) -> str:
    """Canonical key of the current month."""
    today = today or date.today()
    return f"{today.year}-{today.month:02d}"


def available_periods(start_year: int, end_year: int) -> list[str]:
    """Month labels for every month in the inclusive year range."""
    return [
        f"{year} {month}"
        for year in range(start_year, end_year + 1)
        for month in MONTHS_UZ
    ]


@dataclass(frozen=True)
class Period:
    """A period label with key-or-label equality."""

    label: str

    @property
    def key(self) -> str:
        return normalize_period(self.label)

    @property
    def storage_key(self) -> str:
        return period_storage_key(self.label)

    @property
    def is_annual(self) -> bool:
        return is_annual(self.label)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Period):
            return periods_equal(self.label, other.label)
        if isinstance(other, str):
            return periods_equal(self.label, other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.storage_key)

    def __str__(self) -> str:
        return self.label
