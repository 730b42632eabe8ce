"""Income cycle prediction for irregular earners."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

import numpy as np

from config.settings import AnalyticsSettings, get_settings
from core.formatting import round_confidence, round_half_up
from core.models import IncomePrediction, Transaction

__all__ = ["INSUFFICIENT_DATA_CONFIDENCE", "average_income_amount", "predict_income_date"]

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA_CONFIDENCE = 0.3
_MIN_CONFIDENCE = 0.5
_MAX_CONFIDENCE = 0.95


def average_income_amount(transactions: Iterable[Transaction]) -> float:
    """Mean amount of income transactions, or ``0.0`` when there are none."""

    amounts = [txn.amount for txn in transactions if txn.amount > 0]
    if not amounts:
        return 0.0
    return float(np.mean(amounts))


def predict_income_date(
    transactions: Iterable[Transaction],
    reference_date: date,
    settings: Optional[AnalyticsSettings] = None,
    *,
    default_cycle_days: Optional[int] = None,
) -> IncomePrediction:
    """Infer the next expected income date from past income intervals.

    With fewer than two income transactions the prediction falls back to
    ``reference_date + default_cycle_days`` at confidence 0.3. Otherwise the
    confidence shrinks as intervals become irregular, bounded to [0.5, 0.95].
    """

    settings = settings or get_settings()
    cycle_days = settings.default_income_cycle_days if default_cycle_days is None else default_cycle_days

    incomes = sorted(
        (txn for txn in transactions if txn.amount > 0),
        key=lambda txn: txn.date,
        reverse=True,
    )
    average_amount = average_income_amount(incomes)

    if len(incomes) < 2:
        return IncomePrediction(
            next_income_date=reference_date + timedelta(days=cycle_days),
            confidence=INSUFFICIENT_DATA_CONFIDENCE,
            average_amount=average_amount,
            average_interval_days=None,
            sample_size=len(incomes),
        )

    intervals = np.array(
        [abs((newer.date - older.date).days) for newer, older in zip(incomes, incomes[1:])],
        dtype=float,
    )
    average_interval = float(intervals.mean())
    variance = float(np.var(intervals))

    raw_confidence = 1 - variance / settings.income_variance_scale
    confidence = round_confidence(min(_MAX_CONFIDENCE, max(_MIN_CONFIDENCE, raw_confidence)))

    next_date = incomes[0].date + timedelta(days=round_half_up(average_interval))
    logger.debug(
        "Income cycle predicted",
        extra={"average_interval": average_interval, "variance": variance, "confidence": confidence},
    )

    return IncomePrediction(
        next_income_date=next_date,
        confidence=confidence,
        average_amount=average_amount,
        average_interval_days=average_interval,
        sample_size=len(incomes),
    )
