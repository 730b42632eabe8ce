"""Analytics helpers for cash-flow forecasting and categorisation."""

from analytics.categorisation import DEFAULT_CATEGORY_RULES, Categorizer
from analytics.daily_flows import aggregate_daily_flows
from analytics.forecasting import classify_confidence, project_cash_flow
from analytics.income import predict_income_date
from analytics.recurring import detect_recurring_expenses
from analytics.seasonality import detect_weekly_seasonality
from analytics.spending import (
    analyze_spending_velocity,
    category_percentages,
    detect_spending_anomalies,
    spending_by_category,
    top_spending_category,
)
from analytics.trend import (
    classify_trend,
    exponential_moving_average,
    linear_slope,
    moving_average,
)

__all__ = [
    "aggregate_daily_flows",
    "moving_average",
    "exponential_moving_average",
    "linear_slope",
    "classify_trend",
    "detect_weekly_seasonality",
    "detect_recurring_expenses",
    "predict_income_date",
    "classify_confidence",
    "project_cash_flow",
    "DEFAULT_CATEGORY_RULES",
    "Categorizer",
    "spending_by_category",
    "top_spending_category",
    "category_percentages",
    "detect_spending_anomalies",
    "analyze_spending_velocity",
]
