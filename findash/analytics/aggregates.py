"""
Chart-ready aggregates over a (filtered) transaction frame.

Every function here is pure: it takes the canonical frame, never mutates it,
and returns plain rows. Empty input gives empty output.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from findash.analytics.common import year_over_year
from findash.config import MONTH_NAMES


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _yearly_totals(df: pd.DataFrame) -> pd.Series:
    """Net amount per year, oldest first."""
    return df.groupby("year")["amount"].sum().sort_index()


def _monthly_totals(df: pd.DataFrame) -> pd.Series:
    """Net amount per (year, month) for months that have transactions."""
    return df.groupby(["year", "month"])["amount"].sum().sort_index()


def total_amount(df: pd.DataFrame) -> float:
    return float(df["amount"].sum()) if not df.empty else 0.0


# ---------------------------------------------------------------------------
# Year-to-date
# ---------------------------------------------------------------------------

@dataclass
class YtdResult:
    rows: list[dict] = field(default_factory=list)
    years: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"rows": self.rows, "years": self.years}


def ytd_cumulative(df: pd.DataFrame) -> YtdResult:
    """Cumulative net amount per month, one field per year.

    A year's field runs from January to its last month with transactions;
    later months carry no field for that year, and years without data never
    appear.
    """
    rows = [{"name": MONTH_NAMES[i], "month_index": i} for i in range(12)]
    if df.empty:
        return YtdResult(rows=rows, years=[])

    monthly = _monthly_totals(df)
    years = sorted(int(y) for y in monthly.index.get_level_values("year").unique())
    for year in years:
        active = monthly.loc[year]
        cumulative = active.reindex(range(12), fill_value=0.0).cumsum()
        for month in range(int(active.index.max()) + 1):
            rows[month][year] = float(cumulative.iloc[month])
    return YtdResult(rows=rows, years=years)


# ---------------------------------------------------------------------------
# Annual variation
# ---------------------------------------------------------------------------

def annual_variation(df: pd.DataFrame) -> list[dict]:
    """Yearly totals with change against the previous year, newest first."""
    if df.empty:
        return []

    rows = []
    previous: float | None = None
    for year, total in _yearly_totals(df).items():
        current = float(total)
        if previous is None:
            diff, percent = 0.0, 0.0
        else:
            diff, percent = year_over_year(current, previous)
        rows.append({
            "year": int(year),
            "amount": current,
            "previous": previous,
            "diff": diff,
            "percent": percent,
        })
        previous = current
    rows.reverse()
    return rows


# ---------------------------------------------------------------------------
# Monthly average
# ---------------------------------------------------------------------------

def monthly_average(df: pd.DataFrame) -> list[dict]:
    """Average monthly net amount per year over active months only."""
    if df.empty:
        return []
    averages = _monthly_totals(df).groupby(level="year").mean()
    return [{"year": int(y), "average": float(avg)} for y, avg in averages.items()]


# ---------------------------------------------------------------------------
# Waterfall
# ---------------------------------------------------------------------------

def waterfall(df: pd.DataFrame) -> list[dict]:
    """Bridge from the first year's total to the last one through yearly changes.

    Steps move a running level by each year-over-year difference, so the steps
    add up to (last total - first total). The last year is repeated as a closing
    total when there is more than one year.
    """
    totals = _yearly_totals(df)
    if totals.empty:
        return []

    years = [int(y) for y in totals.index]
    first = float(totals.iloc[0])
    entries = [{"name": str(years[0]), "amount": first, "start": 0.0, "end": first, "type": "total"}]

    level = first
    for i in range(1, len(years)):
        diff = float(totals.iloc[i] - totals.iloc[i - 1])
        entries.append({
            "name": f"{years[i - 1]}->{years[i]}",
            "amount": diff,
            "start": level,
            "end": level + diff,
            "type": "step",
        })
        level += diff

    if len(years) > 1:
        last = float(totals.iloc[-1])
        entries.append({"name": str(years[-1]), "amount": last, "start": 0.0, "end": last, "type": "total"})
    return entries
