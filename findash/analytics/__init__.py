"""Pure aggregate computations over the canonical transaction frame."""
from .aggregates import (
    YtdResult, annual_variation, monthly_average, total_amount, waterfall, ytd_cumulative,
)
from .dashboard import dashboard_summary
