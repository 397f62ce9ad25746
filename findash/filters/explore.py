"""
Exploration search: suggestions, exact/contextual matching, monthly buckets.

The explorer searches one field (concept or category). While typing it offers
suggestions ranked by frequency; picking one narrows to exact matches, and
submitting the raw text narrows to substring matches. Results can be further
restricted to one calendar month picked from the bucket series.
"""
from __future__ import annotations

import math
import re
from typing import Optional

import pandas as pd

from findash.config import ITEMS_PER_PAGE, SUGGESTION_DEFAULT_LIMIT, SUGGESTION_LIMIT
from findash.data.schemas import SearchField, SearchMode

_BUCKET_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _column(field: SearchField | str) -> str:
    return SearchField(field).value


def _contains(values: pd.Series, query: str) -> pd.Series:
    return values.str.lower().str.contains(query.lower(), regex=False)


# ---------------------------------------------------------------------------
# Suggestions & matching
# ---------------------------------------------------------------------------

def rank_suggestions(df: pd.DataFrame, field: SearchField | str, query: str = "") -> list[str]:
    """Distinct non-empty values of ``field`` by descending frequency.

    Empty query: the most frequent values. Otherwise only values containing
    the query (case-insensitive), capped lower.
    """
    values = df[_column(field)]
    values = values[values != ""]
    if values.empty:
        return []
    # ties keep first-seen order
    ranked = values.groupby(values, sort=False).size().sort_values(ascending=False, kind="stable")
    items = pd.Series(ranked.index, dtype=object)
    if not query:
        return items.head(SUGGESTION_DEFAULT_LIMIT).tolist()
    return items[_contains(items, query)].head(SUGGESTION_LIMIT).tolist()


def search(
    df: pd.DataFrame,
    field: SearchField | str,
    query: str = "",
    mode: SearchMode | str = SearchMode.SUGGEST,
    selected: Optional[str] = None,
) -> pd.DataFrame:
    """Rows matching the current search mode, newest first."""
    mode = SearchMode(mode)
    column = _column(field)
    if mode == SearchMode.EXACT and selected is not None:
        df = df[df[column] == selected]
    elif mode == SearchMode.CONTEXTUAL and query:
        df = df[_contains(df[column], query)]
    return df.sort_values("date", ascending=False, kind="stable")


# ---------------------------------------------------------------------------
# Monthly buckets
# ---------------------------------------------------------------------------

def bucket_keys(df: pd.DataFrame) -> pd.Series:
    """"YYYY-MM" key for every row."""
    return df["date"].dt.strftime("%Y-%m")


def monthly_buckets(df: pd.DataFrame) -> list[dict]:
    """Net amount per calendar month, oldest first."""
    if df.empty:
        return []
    grouped = df.groupby(bucket_keys(df))["amount"].agg(["sum", "count"]).sort_index()
    return [
        {"name": key, "amount": float(row["sum"]), "abs_amount": abs(float(row["sum"])), "count": int(row["count"])}
        for key, row in grouped.iterrows()
    ]


def restrict_to_bucket(df: pd.DataFrame, key: Optional[str]) -> pd.DataFrame:
    if not key:
        return df
    if not _BUCKET_RE.match(key):
        raise ValueError(f"Invalid bucket key: {key!r} (expected YYYY-MM)")
    return df[bucket_keys(df) == key]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def page_count(n_rows: int, per_page: int = ITEMS_PER_PAGE) -> int:
    return max(1, math.ceil(n_rows / per_page))


def paginate(df: pd.DataFrame, page: int = 1, per_page: int = ITEMS_PER_PAGE) -> pd.DataFrame:
    page = min(max(1, page), page_count(len(df), per_page))
    return df.iloc[(page - 1) * per_page: page * per_page]


# ---------------------------------------------------------------------------
# Explorer state
# ---------------------------------------------------------------------------

class Explorer:
    """Search state for one exploration session.

    ``data`` is the exploration base set (year filter only); suggestions are
    ranked over ``universe``, the full data set, when one is given. Any change
    of field, query or mode clears the bucket restriction and returns to page 1.
    """

    def __init__(
        self,
        data: pd.DataFrame,
        field: SearchField | str = SearchField.CONCEPT,
        universe: Optional[pd.DataFrame] = None,
    ) -> None:
        self.data = data
        self.universe = universe if universe is not None else data
        self.field = SearchField(field)
        self.query = ""
        self.mode = SearchMode.SUGGEST
        self.selected: Optional[str] = None
        self.selected_bucket: Optional[str] = None
        self.page = 1

    def _reset(self, query: str = "") -> None:
        self.query = query
        self.mode = SearchMode.SUGGEST
        self.selected = None
        self.selected_bucket = None
        self.page = 1

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_data(self, data: pd.DataFrame) -> None:
        self.data = data
        self.selected_bucket = None
        self.page = 1

    def set_field(self, field: SearchField | str) -> None:
        self.field = SearchField(field)
        self._reset()

    def type_query(self, text: str) -> None:
        self._reset(text)

    def clear(self) -> None:
        self._reset()

    def select(self, item: str) -> None:
        """Pick a suggestion: exact match on ``item``."""
        self._reset(item)
        self.selected = item
        self.mode = SearchMode.EXACT

    def submit(self) -> None:
        """Search for the typed text as a substring."""
        query = self.query
        self._reset(query)
        if query:
            self.mode = SearchMode.CONTEXTUAL

    def toggle_bucket(self, key: str) -> None:
        self.selected_bucket = None if self.selected_bucket == key else key
        self.page = 1

    def set_page(self, page: int) -> None:
        self.page = min(max(1, page), self.page_count())

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def suggestions(self) -> list[str]:
        return rank_suggestions(self.universe, self.field, self.query)

    def results(self) -> pd.DataFrame:
        return search(self.data, self.field, self.query, self.mode, self.selected)

    def buckets(self) -> list[dict]:
        return monthly_buckets(self.results())

    def transactions(self) -> pd.DataFrame:
        return restrict_to_bucket(self.results(), self.selected_bucket)

    def page_count(self) -> int:
        return page_count(len(self.transactions()))

    def current_page(self) -> pd.DataFrame:
        return paginate(self.transactions(), self.page)
