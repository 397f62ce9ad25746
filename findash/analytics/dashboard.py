"""
Dashboard analytics — everything the overview page needs in one payload.
"""
from __future__ import annotations

import pandas as pd

from findash.analytics.aggregates import (
    annual_variation, monthly_average, total_amount, waterfall, ytd_cumulative,
)
from findash.analytics.common import sanitize_for_json


def dashboard_summary(df: pd.DataFrame) -> dict:
    """Total KPI plus the four aggregate series for an already filtered frame."""
    return sanitize_for_json({
        "total_amount": total_amount(df),
        "transactions": len(df),
        "ytd": ytd_cumulative(df).to_dict(),
        "annual_variation": annual_variation(df),
        "monthly_average": monthly_average(df),
        "waterfall": waterfall(df),
    })
