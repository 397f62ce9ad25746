"""
Safe math helpers used across the analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def year_over_year(current: float, previous: float) -> tuple[float, float]:
    """(diff, percent) of ``current`` against ``previous``.

    When both totals are negative the change is measured on spend magnitude,
    so spending more is a positive change. The percentage denominator is
    always |previous|; a zero previous total gives 0%.
    """
    if current < 0 and previous < 0:
        diff = abs(current) - abs(previous)
    else:
        diff = current - previous
    return diff, safe_divide(diff, abs(previous)) * 100


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas values to JSON-safe Python; year keys become strings."""
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, pd.Timestamp):
        return obj.strftime("%Y-%m-%d")
    return obj
