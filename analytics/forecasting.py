"""Multi-day balance projection for irregular-income cash flows."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

import numpy as np

from analytics.daily_flows import aggregate_daily_flows, net_flow_series
from analytics.income import average_income_amount, predict_income_date
from analytics.recurring import detect_recurring_expenses
from analytics.seasonality import detect_weekly_seasonality, weekday_expense_averages
from analytics.trend import classify_trend, exponential_moving_average
from config.settings import AnalyticsSettings, get_settings
from core.exceptions import InvalidParameterError
from core.formatting import round_half_up
from core.models import (
    CashFlowProjection,
    ConfidenceTier,
    DailyFlow,
    ProjectionDay,
    RecurringExpenseRule,
    Transaction,
    TrendLabel,
    UpcomingIncome,
)

__all__ = [
    "recent_window",
    "resolve_net_daily_flow",
    "classify_confidence",
    "trend_adjustment",
    "project_cash_flow",
]

logger = logging.getLogger(__name__)

_TOP_RECURRING = 5


def recent_window(flows: Sequence[DailyFlow], size: int) -> list[DailyFlow]:
    """Return the most recent ``size`` flows, or all of them when fewer exist."""

    return list(flows[-size:])


def _mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def resolve_net_daily_flow(
    ema_values: Sequence[float],
    average_income: float,
    average_expenses: float,
) -> float:
    """Pick the latest EMA value, falling back to the plain average difference."""

    if ema_values:
        return float(ema_values[-1])
    return average_income - average_expenses


def classify_confidence(
    data_points: int,
    variance: float,
    settings: Optional[AnalyticsSettings] = None,
) -> ConfidenceTier:
    """Grade a projection by sample size and net-flow variance."""

    settings = settings or get_settings()
    if data_points >= settings.confidence_high_min_points and variance < settings.confidence_high_max_variance:
        return "high"
    if data_points >= settings.confidence_medium_min_points and variance < settings.confidence_medium_max_variance:
        return "medium"
    return "low"


def trend_adjustment(trend: TrendLabel, day: int, settings: AnalyticsSettings) -> float:
    if trend == "improving":
        return settings.trend_daily_adjustment * day
    if trend == "declining":
        return -settings.trend_daily_adjustment * day
    return 0.0


def _due_recurring_total(rules: Iterable[RecurringExpenseRule], day: date) -> float:
    return float(sum(rule.average_amount for rule in rules if rule.next_due_date == day))


def project_cash_flow(
    transactions: Sequence[Transaction],
    current_balance: float,
    reference_date: date,
    projection_days: Optional[int] = None,
    safety_threshold: Optional[float] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> CashFlowProjection:
    """Forecast the day-by-day balance after ``reference_date``.

    Parameters
    ----------
    transactions:
        Income (positive) and expense (negative) history.
    current_balance:
        Balance at the end of ``reference_date``.
    reference_date:
        The day the projection starts from; day 1 is the following day.
    projection_days:
        Horizon length, defaults to ``settings.projection_days``.
    safety_threshold:
        Balance floor used for ``days_until_low``, defaults to
        ``settings.safety_threshold``.
    settings:
        Analytics thresholds; the cached environment settings when omitted.

    Returns
    -------
    CashFlowProjection
        Rounded projection with confidence tier, trend and recurring bills.
        ``days_until_low`` is ``None`` when the balance stays above the
        threshold for the whole horizon.
    """

    settings = settings or get_settings()
    horizon = settings.projection_days if projection_days is None else projection_days
    threshold = settings.safety_threshold if safety_threshold is None else safety_threshold
    if horizon < 1:
        raise InvalidParameterError("projection_days must be at least 1")

    daily_flows = aggregate_daily_flows(transactions)
    recent = recent_window(daily_flows, settings.recent_window_days)

    average_income = _mean([flow.income for flow in recent])
    average_expenses = _mean([flow.expenses for flow in recent])

    net_flows = net_flow_series(recent)
    ema_values = exponential_moving_average(net_flows, settings.ema_alpha)
    net_daily_flow = resolve_net_daily_flow(ema_values, average_income, average_expenses)

    trend = classify_trend(net_flows, settings)
    seasonality = detect_weekly_seasonality(daily_flows, settings)
    recent_weekday_expenses = weekday_expense_averages(recent) if seasonality.has_pattern else {}

    recurring = detect_recurring_expenses(transactions, settings)
    income_prediction = predict_income_date(transactions, reference_date, settings)
    income_amount = average_income_amount(transactions)

    running_balance = float(current_balance)
    days_until_low: Optional[int] = None
    projection_by_day: list[ProjectionDay] = []

    for day in range(1, horizon + 1):
        projection_date = reference_date + timedelta(days=day)

        daily_income = average_income
        daily_expenses = average_expenses

        if seasonality.pattern == "weekly":
            seasonal = recent_weekday_expenses.get(projection_date.weekday())
            if seasonal is not None:
                daily_expenses = seasonal

        daily_expenses += _due_recurring_total(recurring, projection_date)

        if income_prediction.next_income_date == projection_date:
            daily_income += income_amount

        running_balance += daily_income - daily_expenses + trend_adjustment(trend, day, settings)

        projection_by_day.append(
            ProjectionDay(
                day=day,
                date=projection_date,
                balance=round_half_up(running_balance),
                income=round_half_up(daily_income),
                expenses=round_half_up(daily_expenses),
            )
        )

        if days_until_low is None and running_balance < threshold:
            days_until_low = day

    flow_variance = float(np.var(net_flows)) if net_flows else 0.0
    confidence = classify_confidence(len(recent), flow_variance, settings)

    upcoming_income: Optional[UpcomingIncome] = None
    if income_prediction.confidence > settings.upcoming_income_min_confidence:
        upcoming_income = UpcomingIncome(
            amount=round_half_up(income_amount),
            date=income_prediction.next_income_date,
            confidence=income_prediction.confidence,
        )

    logger.debug(
        "Cash flow projection completed",
        extra={
            "horizon": horizon,
            "data_points": len(recent),
            "trend": trend,
            "confidence": confidence,
            "days_until_low": days_until_low,
        },
    )

    return CashFlowProjection(
        projected_balance=round_half_up(running_balance),
        days_until_low=days_until_low,
        projection_by_day=projection_by_day,
        average_income=round_half_up(average_income),
        average_expenses=round_half_up(average_expenses),
        net_daily_flow=round_half_up(net_daily_flow),
        confidence=confidence,
        trend=trend,
        recurring_expenses=recurring[:_TOP_RECURRING],
        upcoming_income=upcoming_income,
        seasonality=seasonality,
    )
