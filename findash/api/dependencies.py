"""
FastAPI dependencies — DataStore singleton, filter selection parsing.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query

from findash.data.schemas import ActiveTab, FilterSelection, SearchField, SearchMode
from findash.data.store import DataStore

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None:
        raise HTTPException(503, "Data not loaded yet")
    if not _store.is_loaded:
        raise HTTPException(503, _store.load_error or "Data not loaded yet")
    return _store


def get_store_or_empty() -> DataStore:
    """Return the store even if loading failed (for health/reload endpoints)."""
    if _store is None:
        raise HTTPException(503, "Server not initialized yet")
    return _store


# ---------------------------------------------------------------------------
# Query param parsing
# ---------------------------------------------------------------------------

def parse_selection(
    years: Optional[list[int]] = Query(None, description="Year filter (repeatable)"),
    types: Optional[list[str]] = Query(None, description="Movement type filter (repeatable)"),
    categories: Optional[list[str]] = Query(None, description="Category filter (repeatable)"),
) -> FilterSelection:
    """Selection from query params, taken as is.

    A request carries a whole selection, not a change of types, so nothing is
    pruned here; a category no selected type reaches simply matches no rows.
    """
    return FilterSelection.of(years or (), types or (), categories or ())


def parse_tab(tab: str = Query("overview", description="overview|exploration")) -> ActiveTab:
    try:
        return ActiveTab(tab)
    except ValueError:
        raise HTTPException(400, f"Invalid tab: {tab}")


def parse_field(field: str = Query("concept", description="concept|category")) -> SearchField:
    try:
        return SearchField(field)
    except ValueError:
        raise HTTPException(400, f"Invalid search field: {field}")


def parse_mode(mode: str = Query("suggest", description="suggest|exact|contextual")) -> SearchMode:
    try:
        return SearchMode(mode)
    except ValueError:
        raise HTTPException(400, f"Invalid search mode: {mode}")
