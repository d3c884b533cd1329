"""Load roster snapshots exported from spreadsheets."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any

Record = dict[str, str]


class SnapshotFormatError(Exception):
    """Raised when a snapshot file cannot be read as records."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read snapshot {source}: {reason}")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_csv(text: str) -> list[Record]:
    """Parse CSV text into records keyed by header.

    The delimiter is ';' when the header line contains one, ',' otherwise.
    Blank lines are ignored and missing trailing cells read as "".
    """
    if not text or not text.strip():
        return []

    text = text.lstrip("\ufeff")
    header_line = text.split("\n", 1)[0]
    delimiter = ";" if ";" in header_line else ","

    rows = [
        row
        for row in csv.reader(io.StringIO(text), delimiter=delimiter)
        if any(cell.strip() for cell in row)
    ]
    if not rows:
        return []

    headers = [h.strip() for h in rows[0]]
    records: list[Record] = []
    for row in rows[1:]:
        records.append({
            header: _cell(row[index]) if index < len(row) else ""
            for index, header in enumerate(headers)
            if header
        })
    return records


def parse_json(text: str, source: str = "<json>") -> list[Record]:
    """Parse a JSON array of objects into records with string values."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(source, f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise SnapshotFormatError(source, "expected a JSON array of objects")

    records: list[Record] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise SnapshotFormatError(source, f"item {index} is not an object")
        records.append({str(k).strip(): _cell(v) for k, v in item.items()})
    return records


def load_snapshot(path: str | Path) -> list[Record]:
    """Load a .csv or .json snapshot file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise SnapshotFormatError(str(path), str(e)) from e
    except UnicodeDecodeError as e:
        raise SnapshotFormatError(str(path), "not UTF-8 text") from e

    suffix = path.suffix.lower()
    if suffix == ".json":
        return parse_json(text, source=str(path))
    if suffix in (".csv", ".txt"):
        return parse_csv(text)
    raise SnapshotFormatError(str(path), f"unsupported file type '{suffix}'")
