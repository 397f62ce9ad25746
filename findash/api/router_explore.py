"""
Exploration endpoints — suggestions and search results with monthly buckets.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from findash.analytics.aggregates import total_amount
from findash.analytics.common import sanitize_for_json
from findash.api.dependencies import get_store, parse_field, parse_mode, parse_selection
from findash.api.response_models import ExploreResponse, SuggestionsResponse
from findash.data.schemas import ActiveTab, FilterSelection, SearchField, SearchMode, frame_to_records
from findash.data.store import DataStore
from findash.filters.explore import (
    monthly_buckets, page_count, paginate, rank_suggestions, restrict_to_bucket, search,
)
from findash.filters.selection import apply_filters

router = APIRouter(prefix="/api/explore", tags=["explore"])


@router.get("/suggestions", response_model=SuggestionsResponse)
def suggestions(
    q: str = Query("", description="Partial text typed by the user"),
    field: SearchField = Depends(parse_field),
    store: DataStore = Depends(get_store),
):
    """Distinct values of ``field`` containing ``q``, most frequent first."""
    return SuggestionsResponse(field=field.value, query=q, suggestions=rank_suggestions(store.df, field, q))


@router.get("/results", response_model=ExploreResponse)
def results(
    q: str = Query(""),
    selected: Optional[str] = Query(None, description="Exact value picked from suggestions"),
    bucket: Optional[str] = Query(None, description="YYYY-MM month restriction"),
    page: int = Query(1, ge=1),
    field: SearchField = Depends(parse_field),
    mode: SearchMode = Depends(parse_mode),
    selection: FilterSelection = Depends(parse_selection),
    store: DataStore = Depends(get_store),
):
    """Matches for the search, their monthly buckets, and one page of rows."""
    if mode == SearchMode.EXACT and selected is None:
        raise HTTPException(400, "mode=exact requires 'selected'")

    base = apply_filters(store.df, selection, ActiveTab.EXPLORATION)
    matches = search(base, field, q, mode, selected)
    try:
        rows = restrict_to_bucket(matches, bucket)
    except ValueError as exc:
        raise HTTPException(400, str(exc))

    pages = page_count(len(rows))
    page = min(page, pages)
    return ExploreResponse(
        field=field.value,
        query=q,
        mode=mode.value,
        selected=selected,
        bucket=bucket,
        total_amount=total_amount(rows),
        count=len(rows),
        page=page,
        pages=pages,
        buckets=monthly_buckets(matches),
        transactions=sanitize_for_json(frame_to_records(paginate(rows, page))),
    )
