"""Category aggregation, anomaly and velocity helpers."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import pandas as pd

from config.settings import AnalyticsSettings, get_settings
from core.data_loader import build_transaction_frame
from core.exceptions import InvalidParameterError
from core.formatting import format_currency, round_half_up
from core.models import CategoryShare, Severity, SpendingAnomaly, SpendingVelocity, Transaction

__all__ = [
    "spending_by_category",
    "top_spending_category",
    "category_percentages",
    "detect_spending_anomalies",
    "analyze_spending_velocity",
]

_SEVERITY_ORDER: dict[Severity, int] = {"high": 3, "medium": 2, "low": 1}


def _categorised_expenses(transactions: Sequence[Transaction]) -> pd.DataFrame:
    frame = build_transaction_frame(transactions)
    mask = (frame["amount"] < 0) & frame["category"].notna() & (frame["category"] != "")
    expenses = frame.loc[mask].copy()
    expenses["spend"] = expenses["amount"].abs()
    return expenses


def spending_by_category(transactions: Sequence[Transaction]) -> dict[str, float]:
    """Return total expense per category, in first-seen category order."""

    expenses = _categorised_expenses(transactions)
    if expenses.empty:
        return {}
    totals = expenses.groupby("category", sort=False)["spend"].sum()
    return {str(category): float(amount) for category, amount in totals.items()}


def top_spending_category(transactions: Sequence[Transaction]) -> Optional[tuple[str, float]]:
    totals = spending_by_category(transactions)
    if not totals:
        return None
    category = max(totals, key=totals.__getitem__)
    return category, totals[category]


def category_percentages(transactions: Sequence[Transaction]) -> list[CategoryShare]:
    """Return each category's share of total expense, largest first."""

    totals = spending_by_category(transactions)
    grand_total = sum(totals.values())

    rows: list[CategoryShare] = [
        {
            "category": category,
            "amount": amount,
            "percentage": round_half_up(amount / grand_total * 100) if grand_total > 0 else 0,
        }
        for category, amount in totals.items()
    ]
    rows.sort(key=lambda row: row["amount"], reverse=True)
    return rows


def detect_spending_anomalies(
    transactions: Sequence[Transaction],
    settings: Optional[AnalyticsSettings] = None,
) -> list[SpendingAnomaly]:
    """Flag expenses that are unusually large for their category.

    Amounts above ``anomaly_high_multiplier`` times the category mean are
    ``high`` severity; above ``anomaly_medium_multiplier`` times are
    ``medium``. Results are ordered by severity, high first.
    """

    settings = settings or get_settings()
    flagged = [txn for txn in transactions if txn.amount < 0 and txn.category]
    if not flagged:
        return []

    averages = spending_by_category(flagged)
    counts = pd.Series([txn.category for txn in flagged]).value_counts()
    averages = {category: total / int(counts[category]) for category, total in averages.items()}

    anomalies: list[SpendingAnomaly] = []
    for txn in flagged:
        average = averages[txn.category]
        amount = abs(txn.amount)
        if amount > average * settings.anomaly_high_multiplier:
            multiplier, severity = settings.anomaly_high_multiplier, "high"
        elif amount > average * settings.anomaly_medium_multiplier:
            multiplier, severity = settings.anomaly_medium_multiplier, "medium"
        else:
            continue

        anomalies.append(
            SpendingAnomaly(
                transaction=txn,
                reason=(
                    f"{txn.category} spending is {multiplier:g}x higher than average "
                    f"({format_currency(average, settings.currency_symbol)})"
                ),
                severity=severity,
                category_average=average,
            )
        )

    anomalies.sort(key=lambda anomaly: _SEVERITY_ORDER[anomaly.severity], reverse=True)
    return anomalies


def analyze_spending_velocity(
    transactions: Sequence[Transaction],
    reference_date: date,
    window_days: int = 7,
    settings: Optional[AnalyticsSettings] = None,
) -> SpendingVelocity:
    """Compare the daily burn rate of the last window with the window before it."""

    settings = settings or get_settings()
    if window_days < 1:
        raise InvalidParameterError("window_days must be at least 1")

    frame = build_transaction_frame(transactions)
    frame = frame.loc[frame["amount"] < 0]
    age = (pd.Timestamp(reference_date) - frame["date"]).dt.days

    recent_spend = float(frame.loc[(age >= 0) & (age < window_days), "amount"].abs().sum())
    previous_spend = float(
        frame.loc[(age >= window_days) & (age < window_days * 2), "amount"].abs().sum()
    )

    velocity = recent_spend / window_days
    previous_velocity = previous_spend / window_days

    if velocity > previous_velocity * settings.velocity_increase_ratio:
        trend = "increasing"
    elif velocity < previous_velocity * settings.velocity_decrease_ratio:
        trend = "decreasing"
    else:
        trend = "stable"

    if trend == "increasing" and velocity > settings.velocity_high_risk:
        risk: Severity = "high"
    elif trend == "increasing" or velocity > settings.velocity_medium_risk:
        risk = "medium"
    else:
        risk = "low"

    return SpendingVelocity(
        velocity=round_half_up(velocity),
        previous_velocity=round_half_up(previous_velocity),
        trend=trend,
        risk=risk,
    )
