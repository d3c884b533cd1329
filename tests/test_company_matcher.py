"""Tests for roster record to company matching."""

import logging

import pytest

from filing_engine.sync.company_matcher import (
    CompanyMatcher,
    MatchedBy,
    clean_tax_id,
    normalize_company_name,
)
from filing_engine.types import Company


class TestNormalizeCompanyName:
    """Test name comparison form."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ('"Alfa Trade" MChJ', "alfa trade"),
            ("ALFA TRADE mchj", "alfa trade"),
            ("«Alfa   Trade» LLC", "alfa trade"),
            ("ООО «Ромашка»", "ромашка"),
            ("Beta Servis", "beta servis"),
            ("Okean XK", "okean"),
        ],
    )
    def test_normalization(self, raw, expected):
        assert normalize_company_name(raw) == expected

    def test_suffix_only_removed_as_whole_word(self):
        """Legal abbreviations inside words are kept."""
        assert normalize_company_name("Okmchj Savdo") == "okmchj savdo"

    def test_empty(self):
        assert normalize_company_name(None) == ""
        assert normalize_company_name("  ") == ""


class TestCleanTaxId:
    @pytest.mark.parametrize("raw", [None, "", " ", "-", "0", "?", "000000000"])
    def test_placeholders(self, raw):
        assert clean_tax_id(raw) is None

    def test_real_tax_id_is_trimmed(self):
        assert clean_tax_id(" 123456789 ") == "123456789"


class TestCompanyMatcher:
    """Test match priority and fallbacks."""

    def test_tax_id_match(self, companies):
        match = CompanyMatcher(companies).match("123456789", "something else")
        assert match is not None
        assert match.company.id == "c-alfa"
        assert match.matched_by is MatchedBy.TAX_ID

    def test_tax_id_wins_over_name(self, alfa, beta):
        """A tax-id hit beats a name that points at another company."""
        match = CompanyMatcher([alfa, beta]).match("123456789", "Beta Servis")
        assert match.company.id == "c-alfa"
        assert match.matched_by is MatchedBy.TAX_ID

    def test_name_fallback(self, companies):
        match = CompanyMatcher(companies).match("", "BETA SERVIS MCHJ")
        assert match is not None
        assert match.company.id == "c-beta"
        assert match.matched_by is MatchedBy.NAME

    def test_unknown_tax_id_falls_back_to_name(self, companies):
        match = CompanyMatcher(companies).match("555555555", "Alfa Trade")
        assert match.company.id == "c-alfa"
        assert match.matched_by is MatchedBy.NAME

    def test_placeholder_tax_ids_are_ignored(self, companies):
        """A '-' in the roster must not match a company stored with '-'."""
        assert CompanyMatcher(companies).match("-", "Unknown Co") is None

    def test_no_partial_matching(self, companies):
        assert CompanyMatcher(companies).match(None, "Alfa") is None
        assert CompanyMatcher(companies).match(None, "Alfa Trade Group") is None

    def test_no_match(self, companies):
        assert CompanyMatcher(companies).match("111111111", "Gamma") is None
        assert CompanyMatcher(companies).match(None, None) is None

    def test_first_company_wins_on_duplicate_keys(self):
        first = Company(id="first", name="Same Name", tax_id="111")
        second = Company(id="second", name="Same Name", tax_id="111")
        matcher = CompanyMatcher([first, second])
        assert matcher.match("111", None).company.id == "first"
        assert matcher.match(None, "same name").company.id == "first"

    def test_name_match_is_logged(self, companies, caplog):
        with caplog.at_level(logging.INFO, logger="filing_engine.sync.company_matcher"):
            CompanyMatcher(companies).match(None, "Beta Servis")
        assert any("by name" in r.getMessage() for r in caplog.records)

    def test_tax_id_match_is_not_logged(self, companies, caplog):
        with caplog.at_level(logging.INFO, logger="filing_engine.sync.company_matcher"):
            CompanyMatcher(companies).match("123456789", None)
        assert caplog.records == []
