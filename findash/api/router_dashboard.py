"""
Dashboard endpoints — YTD, annual variation, monthly average, waterfall.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from findash.analytics.aggregates import (
    annual_variation, monthly_average, waterfall, ytd_cumulative,
)
from findash.analytics.common import sanitize_for_json
from findash.analytics.dashboard import dashboard_summary
from findash.api.dependencies import get_store, parse_selection, parse_tab
from findash.data.schemas import ActiveTab, FilterSelection
from findash.data.store import DataStore
from findash.filters.selection import apply_filters

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _safe_json(data) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


def _visible(store: DataStore, selection: FilterSelection, tab: ActiveTab):
    return apply_filters(store.df, selection, tab)


@router.get("")
def summary(
    store: DataStore = Depends(get_store),
    selection: FilterSelection = Depends(parse_selection),
    tab: ActiveTab = Depends(parse_tab),
):
    """Total amount and every aggregate for the current selection."""
    data = dashboard_summary(_visible(store, selection, tab))
    data["selection"] = selection.to_dict()
    return _safe_json(data)


@router.get("/ytd")
def ytd(
    store: DataStore = Depends(get_store),
    selection: FilterSelection = Depends(parse_selection),
    tab: ActiveTab = Depends(parse_tab),
):
    """Cumulative net amount per month, one series per year."""
    return _safe_json(ytd_cumulative(_visible(store, selection, tab)).to_dict())


@router.get("/variation")
def variation(
    store: DataStore = Depends(get_store),
    selection: FilterSelection = Depends(parse_selection),
    tab: ActiveTab = Depends(parse_tab),
):
    """Yearly totals with year-over-year change, newest first."""
    return _safe_json({"rows": annual_variation(_visible(store, selection, tab))})


@router.get("/monthly-average")
def average(
    store: DataStore = Depends(get_store),
    selection: FilterSelection = Depends(parse_selection),
    tab: ActiveTab = Depends(parse_tab),
):
    return _safe_json({"rows": monthly_average(_visible(store, selection, tab))})


@router.get("/waterfall")
def bridge(
    store: DataStore = Depends(get_store),
    selection: FilterSelection = Depends(parse_selection),
    tab: ActiveTab = Depends(parse_tab),
):
    return _safe_json({"rows": waterfall(_visible(store, selection, tab))})
