"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    rows: int
    years: list[int]
    date_range: str
    error: Optional[str] = None


class FilterOptionsResponse(BaseModel):
    years: list[int]
    types: list[str]
    categories_by_type: dict[str, list[str]]


class SuggestionsResponse(BaseModel):
    field: str
    query: str
    suggestions: list[str]


class ExploreResponse(BaseModel):
    field: str
    query: str
    mode: str
    selected: Optional[str] = None
    bucket: Optional[str] = None
    total_amount: float
    count: int
    page: int
    pages: int
    buckets: list[dict[str, Any]]
    transactions: list[dict[str, Any]]
