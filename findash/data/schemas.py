"""
Canonical transaction record, source descriptors, and filter selection schemas.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd


class SourceRole(str, Enum):
    CURRENT = "current"
    HISTORICAL = "historical"


class SourceKind(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"


class ActiveTab(str, Enum):
    OVERVIEW = "overview"
    EXPLORATION = "exploration"


class SearchField(str, Enum):
    CONCEPT = "concept"
    CATEGORY = "category"


class SearchMode(str, Enum):
    SUGGEST = "suggest"
    EXACT = "exact"
    CONTEXTUAL = "contextual"


@dataclass(frozen=True)
class Transaction:
    """One normalized financial movement. Read-only once produced."""
    operation_type: str
    category: str
    concept: str
    entity: str
    note: str
    amount: float
    date: dt.date
    source: str = ""

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        """Zero-based month (January = 0)."""
        return self.date.month - 1


@dataclass(frozen=True)
class SourceSpec:
    """Where a source lives and which side of the cutoff it is trusted for."""
    name: str
    path: Path
    kind: SourceKind = SourceKind.CSV
    role: SourceRole = SourceRole.HISTORICAL
    optional: bool = False

    @classmethod
    def from_config(cls, entry: dict, folder: Path) -> "SourceSpec":
        return cls(
            name=entry["name"],
            path=folder / entry["filename"],
            kind=SourceKind(entry.get("kind", "csv")),
            role=SourceRole(entry.get("role", "historical")),
            optional=bool(entry.get("optional", False)),
        )


# ---------------------------------------------------------------------------
# Filter selection
# ---------------------------------------------------------------------------

_DIMENSIONS = ("years", "types", "categories")


@dataclass(frozen=True)
class FilterSelection:
    """Year / type / category selection. An empty set means "no constraint"."""
    years: frozenset[int] = field(default_factory=frozenset)
    types: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(
        cls,
        years: Iterable[int] = (),
        types: Iterable[str] = (),
        categories: Iterable[str] = (),
    ) -> "FilterSelection":
        return cls(frozenset(int(y) for y in years), frozenset(types), frozenset(categories))

    def toggle(self, dimension: str, value) -> "FilterSelection":
        """Return a new selection with ``value`` added to or removed from ``dimension``."""
        if dimension not in _DIMENSIONS:
            raise ValueError(f"Unknown filter dimension: {dimension}")
        current: frozenset = getattr(self, dimension)
        updated = current - {value} if value in current else current | {value}
        return replace(self, **{dimension: updated})

    def with_years(self, years: Iterable[int]) -> "FilterSelection":
        return replace(self, years=frozenset(int(y) for y in years))

    def with_types(self, types: Iterable[str]) -> "FilterSelection":
        return replace(self, types=frozenset(types))

    def with_categories(self, categories: Iterable[str]) -> "FilterSelection":
        return replace(self, categories=frozenset(categories))

    @property
    def is_empty(self) -> bool:
        return not (self.years or self.types or self.categories)

    def to_dict(self) -> dict:
        return {
            "years": sorted(self.years),
            "types": sorted(self.types),
            "categories": sorted(self.categories),
        }


# ---------------------------------------------------------------------------
# Canonical frame
# ---------------------------------------------------------------------------

TRANSACTION_COLUMNS = [
    "date", "year", "month", "operation_type", "category",
    "concept", "entity", "note", "amount", "source",
]


def transactions_to_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Build the canonical DataFrame, preserving input order."""
    if not transactions:
        df = pd.DataFrame({c: pd.Series(dtype=object) for c in TRANSACTION_COLUMNS})
        df["date"] = pd.Series(dtype="datetime64[ns]")
        df["amount"] = pd.Series(dtype="float64")
        df["year"] = pd.Series(dtype="int64")
        df["month"] = pd.Series(dtype="int64")
        return df

    df = pd.DataFrame({
        "date": pd.to_datetime([t.date for t in transactions]),
        "year": [t.year for t in transactions],
        "month": [t.month for t in transactions],
        "operation_type": [t.operation_type for t in transactions],
        "category": [t.category for t in transactions],
        "concept": [t.concept for t in transactions],
        "entity": [t.entity for t in transactions],
        "note": [t.note for t in transactions],
        "amount": [float(t.amount) for t in transactions],
        "source": [t.source for t in transactions],
    })
    return df[TRANSACTION_COLUMNS]


def frame_to_records(df: pd.DataFrame) -> list[dict]:
    """Transaction rows as JSON-friendly dicts (ISO dates)."""
    if df.empty:
        return []
    out = df[TRANSACTION_COLUMNS].copy()
    out["date"] = out["date"].dt.strftime("%Y-%m-%d")
    return out.to_dict(orient="records")
