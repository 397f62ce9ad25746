"""
Meta endpoints: health, filter options, reload.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from findash.api.dependencies import get_store, get_store_or_empty
from findash.api.response_models import FilterOptionsResponse, HealthResponse
from findash.data.store import DataStore
from findash.errors import SourceLoadFailed

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: DataStore = Depends(get_store_or_empty)):
    return HealthResponse(
        status="ok" if store.is_loaded else "error",
        rows=store.row_count(),
        years=store.years(),
        date_range=store.date_range(),
        error=store.load_error,
    )


@router.get("/filters/options", response_model=FilterOptionsResponse)
def filter_options(store: DataStore = Depends(get_store)):
    """Years (newest first), movement types, and the categories under each type."""
    return FilterOptionsResponse(
        years=store.years(),
        types=store.types(),
        categories_by_type=store.categories_by_type(),
    )


@router.post("/reload", response_model=HealthResponse)
def reload_data(store: DataStore = Depends(get_store_or_empty)):
    """Re-read every source. A failed load leaves the service in an error state."""
    try:
        store.load()
    except (SourceLoadFailed, ValueError) as exc:
        raise HTTPException(503, str(exc))
    return health(store)
