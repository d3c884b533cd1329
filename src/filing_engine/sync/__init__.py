"""Roster snapshot intake: parsing, company matching, status mapping."""

from filing_engine.sync.company_matcher import (
    CompanyMatch,
    CompanyMatcher,
    MatchedBy,
    normalize_company_name,
)
from filing_engine.sync.field_mapper import FieldMapper, MappingRule, map_status
from filing_engine.sync.snapshot import SnapshotFormatError, load_snapshot, parse_csv, parse_json

__all__ = [
    "CompanyMatch",
    "CompanyMatcher",
    "FieldMapper",
    "MappingRule",
    "MatchedBy",
    "SnapshotFormatError",
    "load_snapshot",
    "map_status",
    "normalize_company_name",
    "parse_csv",
    "parse_json",
]
