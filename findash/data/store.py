"""
DataStore — In-memory transaction set backed by pandas.

Loaded once at startup (or on reload), read-only afterwards. Filtering and
aggregation never mutate it; they work on views of ``df``.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional, Sequence

import pandas as pd

from findash.config import CUTOFF_DATE
from findash.data.loader import load_all_sources
from findash.data.schemas import SourceSpec, Transaction, transactions_to_frame
from findash.errors import SourceLoadFailed
from findash.logging_setup import get_logger

logger = get_logger("findash.data.store")


class DataStore:
    """Canonical transaction frame with metadata accessors for filter UIs."""

    def __init__(self) -> None:
        self.df: pd.DataFrame = transactions_to_frame([])
        self.load_error: Optional[str] = None
        self._loaded = False

    @classmethod
    def from_transactions(cls, transactions: Sequence[Transaction]) -> "DataStore":
        store = cls()
        store._set(transactions)
        return store

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        sources: list[SourceSpec] | None = None,
        cutoff: dt.date = CUTOFF_DATE,
    ) -> "DataStore":
        """Load and merge all sources. On failure the previous data is dropped."""
        try:
            transactions = load_all_sources(sources, cutoff)
        except (SourceLoadFailed, ValueError) as exc:
            logger.error("Load failed: %s", exc)
            self.df = transactions_to_frame([])
            self.load_error = str(exc)
            self._loaded = False
            raise
        self._set(transactions)
        return self

    def _set(self, transactions: Sequence[Transaction]) -> None:
        self.df = transactions_to_frame(transactions)
        self.load_error = None
        self._loaded = True

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def years(self) -> list[int]:
        """Years with data, newest first."""
        if self.df.empty:
            return []
        return sorted((int(y) for y in self.df["year"].unique()), reverse=True)

    def types(self) -> list[str]:
        """Non-empty movement types, sorted."""
        if self.df.empty:
            return []
        return sorted(t for t in self.df["operation_type"].unique() if t)

    def categories_by_type(self) -> dict[str, list[str]]:
        """Non-empty categories seen under each movement type."""
        if self.df.empty:
            return {}
        df = self.df[(self.df["operation_type"] != "") & (self.df["category"] != "")]
        grouped = df.groupby("operation_type")["category"].unique()
        mapping = {t: sorted(cats) for t, cats in grouped.items()}
        return {t: mapping.get(t, []) for t in self.types()}

    def date_range(self) -> str:
        if self.df.empty:
            return "N/A"
        return f"{self.df['date'].min():%Y-%m-%d} to {self.df['date'].max():%Y-%m-%d}"

    def row_count(self) -> int:
        return len(self.df)
