"""
Record normalization: locale-aware amount/date parsing and field cleanup.

Raw records are string-keyed mappings as they come out of a CSV export or a
spreadsheet sheet. Both source formats share the same rejection and derivation
rules; the subclasses only decide which cells hold the date and the amount.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd

from findash.config import (
    AMOUNT_COLUMN, COLUMN_MAP, DATE_COLUMN, DATE_FALLBACK_COLUMN, TRIMMED_FIELDS,
)
from findash.data.schemas import Transaction
from findash.errors import RecordRejected
from findash.logging_setup import get_logger

logger = get_logger("findash.data.normalize")

_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2}|\d{4})$")


# ---------------------------------------------------------------------------
# Amount / date parsing
# ---------------------------------------------------------------------------

def parse_amount(value: Any) -> float:
    """Parse a Spanish-locale amount ("-1.234,56" → -1234.56).

    Numbers already parsed by the source are passed through.
    """
    if isinstance(value, bool):
        raise RecordRejected(f"invalid amount: {value!r}")
    if isinstance(value, (int, float, np.integer, np.floating)):
        amount = float(value)
    else:
        if value is None:
            raise RecordRejected("amount is missing")
        s = str(value).strip()
        if not s:
            raise RecordRejected("amount is empty")
        s = s.replace(".", "").replace(",", ".")
        try:
            amount = float(s)
        except ValueError as exc:
            raise RecordRejected(f"invalid amount: {value!r}") from exc
    if math.isnan(amount) or math.isinf(amount):
        raise RecordRejected(f"invalid amount: {value!r}")
    return amount


def parse_date(value: Any) -> dt.date:
    """Parse DD/MM/YY or DD/MM/YYYY; native date values pass through."""
    if value is None or value is pd.NaT:
        raise RecordRejected("date is missing")
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    m = _DATE_RE.match(str(value).strip())
    if not m:
        raise RecordRejected(f"invalid date: {value!r}")
    day, month, year = m.groups()
    if len(year) == 2:
        year = f"20{year}"
    try:
        return dt.date(int(year), int(month), int(day))
    except ValueError as exc:
        raise RecordRejected(f"invalid date: {value!r}") from exc


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NaT:
        return True
    return isinstance(value, str) and not value.strip()


def _text(value: Any) -> str:
    return "" if _is_blank(value) else str(value)


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------

class RecordNormalizer:
    """Turn raw records into canonical Transactions or reject them."""

    def __init__(self, source: str = "") -> None:
        self.source = source

    def raw_date(self, record: Mapping[str, Any]) -> Any:
        return record.get(DATE_COLUMN)

    def raw_amount(self, record: Mapping[str, Any]) -> Any:
        return record.get(AMOUNT_COLUMN)

    def missing_columns(self, columns: Iterable[str]) -> list[str]:
        """Required columns absent from a source header."""
        columns = set(columns)
        return [c for c in (DATE_COLUMN, AMOUNT_COLUMN) if c not in columns]

    def normalize(self, record: Mapping[str, Any]) -> Transaction:
        """Return a Transaction or raise RecordRejected for bad data."""
        if not isinstance(record, Mapping):
            raise TypeError(f"expected a mapping record, got {type(record).__name__}")

        date = parse_date(self.raw_date(record))
        amount = parse_amount(self.raw_amount(record))

        fields = {}
        for raw_col, name in COLUMN_MAP.items():
            text = _text(record.get(raw_col))
            fields[name] = text.strip() if name in TRIMMED_FIELDS else text

        return Transaction(amount=amount, date=date, source=self.source, **fields)

    def normalize_all(self, records: Iterable[Mapping[str, Any]]) -> list[Transaction]:
        """Normalize every record, silently dropping rejected ones."""
        out: list[Transaction] = []
        rejected = 0
        for record in records:
            try:
                out.append(self.normalize(record))
            except RecordRejected as exc:
                rejected += 1
                logger.debug("Rejected record from %s: %s", self.source or "?", exc)
        if rejected:
            logger.info("%s: rejected %d of %d records", self.source or "source", rejected, rejected + len(out))
        return out


class CsvRecordNormalizer(RecordNormalizer):
    """Bank CSV export: every cell is text."""


class SpreadsheetRecordNormalizer(RecordNormalizer):
    """Spreadsheet export: cells may already be datetimes or numbers."""

    def missing_columns(self, columns: Iterable[str]) -> list[str]:
        columns = set(columns)
        missing = [] if DATE_COLUMN in columns or DATE_FALLBACK_COLUMN in columns else [DATE_COLUMN]
        if AMOUNT_COLUMN not in columns:
            missing.append(AMOUNT_COLUMN)
        return missing

    def raw_date(self, record: Mapping[str, Any]) -> Any:
        value = record.get(DATE_COLUMN)
        if _is_blank(value):
            value = record.get(DATE_FALLBACK_COLUMN)
        return None if _is_blank(value) else value

    def raw_amount(self, record: Mapping[str, Any]) -> Any:
        value = record.get(AMOUNT_COLUMN)
        return None if _is_blank(value) else value
