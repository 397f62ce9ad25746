"""
Filter selection over the transaction frame and type/category consistency.

``apply_filters`` is a pure function of (data, selection, tab). The
``FilterEngine`` is the one place a selection is changed; when the types or
the data change it drops categories that none of the selected types reach.
A selection installed whole with unchanged types is kept as given.
"""
from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from findash.data.schemas import ActiveTab, FilterSelection
from findash.logging_setup import get_logger

logger = get_logger("findash.filters.selection")


def apply_filters(
    df: pd.DataFrame,
    selection: FilterSelection,
    tab: ActiveTab = ActiveTab.OVERVIEW,
) -> pd.DataFrame:
    """Rows passing every non-empty dimension (OR within, AND across).

    Exploration ignores type and category; only years apply there.
    """
    mask = pd.Series(True, index=df.index)
    if selection.years:
        mask &= df["year"].isin(list(selection.years))
    if tab == ActiveTab.OVERVIEW:
        if selection.types:
            mask &= df["operation_type"].isin(list(selection.types))
        if selection.categories:
            mask &= df["category"].isin(list(selection.categories))
    return df[mask]


def reachable_categories(df: pd.DataFrame, types: Iterable[str]) -> set[str]:
    """Categories that co-occur with at least one of ``types`` in ``df``."""
    types = list(types)
    if not types or df.empty:
        return set()
    return set(df.loc[df["operation_type"].isin(types), "category"].unique())


def prune_categories(df: pd.DataFrame, selection: FilterSelection) -> FilterSelection:
    """Drop selected categories not reachable from the selected types.

    Returns ``selection`` itself when nothing needs to change.
    """
    if not selection.types or not selection.categories:
        return selection
    valid = selection.categories & reachable_categories(df, selection.types)
    if valid == selection.categories:
        return selection
    logger.debug("Pruned categories: %s", sorted(selection.categories - valid))
    return selection.with_categories(valid)


class FilterEngine:
    """Owner of the filter selection and active tab for one session."""

    def __init__(self, df: pd.DataFrame, selection: FilterSelection | None = None) -> None:
        self._df = df
        self._selection = selection or FilterSelection()
        self.active_tab = ActiveTab.OVERVIEW

    @property
    def data(self) -> pd.DataFrame:
        return self._df

    @property
    def selection(self) -> FilterSelection:
        return self._selection

    def _revalidate(self) -> None:
        self._selection = prune_categories(self._df, self._selection)

    def _replace(self, selection: FilterSelection) -> None:
        """Install ``selection``, pruning categories only if the types changed."""
        types_changed = selection.types != self._selection.types
        self._selection = selection
        if types_changed:
            self._revalidate()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_data(self, df: pd.DataFrame) -> None:
        self._df = df
        self._revalidate()

    def set_selection(self, selection: FilterSelection) -> None:
        self._replace(selection)

    def toggle_year(self, year: int) -> None:
        self._selection = self._selection.toggle("years", int(year))

    def toggle_type(self, operation_type: str) -> None:
        self._replace(self._selection.toggle("types", operation_type))

    def set_types(self, types: Iterable[str]) -> None:
        self._replace(self._selection.with_types(types))

    def toggle_category(self, category: str) -> None:
        self._selection = self._selection.toggle("categories", category)

    def set_tab(self, tab: ActiveTab | str) -> None:
        self.active_tab = ActiveTab(tab)

    def clear(self) -> None:
        self._selection = FilterSelection()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def visible(self) -> pd.DataFrame:
        return apply_filters(self._df, self._selection, self.active_tab)
