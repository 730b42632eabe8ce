"""Core logic for assembling FlowCast cash-flow reports."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union

from analytics.categorisation import Categorizer
from analytics.forecasting import project_cash_flow
from analytics.spending import (
    analyze_spending_velocity,
    category_percentages,
    detect_spending_anomalies,
    top_spending_category,
)
from config.settings import AnalyticsSettings, get_settings
from core.data_loader import coerce_transactions
from core.formatting import to_serializable
from core.models import CashFlowReport, Transaction

__all__ = ["build_cash_flow_report", "report_to_dict"]

logger = logging.getLogger(__name__)


def build_cash_flow_report(
    records: Iterable[Union[Transaction, Mapping[str, Any]]],
    current_balance: float,
    reference_date: date,
    projection_days: Optional[int] = None,
    safety_threshold: Optional[float] = None,
    *,
    categorizer: Optional[Categorizer] = None,
    settings: Optional[AnalyticsSettings] = None,
) -> CashFlowReport:
    """Categorise a transaction batch and project the balance forward.

    Records may be :class:`Transaction` objects or raw mappings; raw mappings
    raise :class:`core.exceptions.MalformedTransactionError` when invalid.
    Categories assigned here feed the recurring-bill detection inside the
    projection, so bills sharing a description but not a category stay apart.
    """

    settings = settings or get_settings()
    categorizer = categorizer or Categorizer(settings=settings)

    transactions = coerce_transactions(records)
    categorised = categorizer.categorize_many(transactions)
    categorised_txns = [
        Transaction(
            amount=result.amount,
            date=result.date,
            type=result.type,
            category=result.category,
            description=result.description,
            merchant_name=result.merchant_name,
            id=result.id,
        )
        for result in categorised
    ]

    projection = project_cash_flow(
        categorised_txns,
        current_balance=current_balance,
        reference_date=reference_date,
        projection_days=projection_days,
        safety_threshold=safety_threshold,
        settings=settings,
    )

    report = CashFlowReport(
        reference_date=reference_date,
        current_balance=float(current_balance),
        transactions=categorised,
        projection=projection,
        category_breakdown=category_percentages(categorised_txns),
        top_category=top_spending_category(categorised_txns),
        anomalies=detect_spending_anomalies(categorised_txns, settings),
        velocity=analyze_spending_velocity(categorised_txns, reference_date, settings=settings),
    )

    logger.info(
        "Cash flow report built",
        extra={
            "transactions": len(transactions),
            "days_until_low": projection.days_until_low,
            "anomalies": len(report.anomalies),
        },
    )
    return report


def report_to_dict(report: CashFlowReport) -> dict[str, Any]:
    """Return a JSON-ready representation of ``report``."""

    return to_serializable(report)
