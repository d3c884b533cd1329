"""Resolve roster records to internal companies."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from filing_engine.types import Company

logger = logging.getLogger(__name__)

_QUOTES_RE = re.compile(r"[\"'`‘’“”«»]")
# Legal-entity abbreviations (Uzbek, Russian, English), removed as whole words.
LEGAL_SUFFIXES: tuple[str, ...] = (
    "mchj", "xk", "fx", "ok", "qk", "llc", "oao", "ooo", "zao", "chp",
    "мчж", "хк", "фх", "ок", "ооо", "оао", "зао", "чп", "ип",
)
_SUFFIX_RE = re.compile(r"\b(?:" + "|".join(LEGAL_SUFFIXES) + r")\b")
_SPACES_RE = re.compile(r"\s+")

# Tax ids that stand in for "unknown" in roster exports.
PLACEHOLDER_TAX_IDS = frozenset({"", "-", "0", "?", "000000000"})


def normalize_company_name(name: str | None) -> str:
    """Comparison form of a company name."""
    if not name:
        return ""
    value = _QUOTES_RE.sub("", name.lower())
    value = _SUFFIX_RE.sub(" ", value)
    return _SPACES_RE.sub(" ", value).strip()


def clean_tax_id(tax_id: str | None) -> str | None:
    """Return a usable tax id, or None for absent/placeholder values."""
    if tax_id is None:
        return None
    value = str(tax_id).strip()
    if value in PLACEHOLDER_TAX_IDS:
        return None
    return value


class MatchedBy(str, Enum):
    TAX_ID = "tax_id"
    NAME = "name"


@dataclass(frozen=True)
class CompanyMatch:
    """A resolved roster record."""

    company: Company
    matched_by: MatchedBy


class CompanyMatcher:
    """Matches roster records to a company directory.

    Priority (first hit wins):
    1. Exact tax id
    2. Exact normalized name

    When two companies share a key, the one listed first in the directory
    wins. There is no partial or substring matching.
    """

    def __init__(self, companies: Iterable[Company]):
        self._by_tax_id: dict[str, Company] = {}
        self._by_name: dict[str, Company] = {}
        for company in companies:
            tax_id = clean_tax_id(company.tax_id)
            if tax_id:
                self._by_tax_id.setdefault(tax_id, company)
            name = normalize_company_name(company.name)
            if name:
                self._by_name.setdefault(name, company)

    def match(self, tax_id: str | None, raw_name: str | None) -> CompanyMatch | None:
        """Resolve one record, or return None if nothing matches."""
        cleaned_tax_id = clean_tax_id(tax_id)
        if cleaned_tax_id:
            company = self._by_tax_id.get(cleaned_tax_id)
            if company is not None:
                return CompanyMatch(company, MatchedBy.TAX_ID)

        normalized = normalize_company_name(raw_name)
        if normalized:
            company = self._by_name.get(normalized)
            if company is not None:
                logger.info(
                    "Matched roster record %r (tax id %r) to company %s %r by name %r",
                    raw_name,
                    tax_id,
                    company.id,
                    company.name,
                    normalized,
                )
                return CompanyMatch(company, MatchedBy.NAME)

        return None
