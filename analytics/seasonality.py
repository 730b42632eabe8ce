"""Weekly seasonality detection over daily flows.

Weekdays follow :meth:`datetime.date.weekday` (Monday is 0). Flow dates are
naive calendar dates, so bucketing never depends on the host timezone.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from config.settings import AnalyticsSettings, get_settings
from core.models import DailyFlow, SeasonalityResult

__all__ = ["weekday_expense_averages", "detect_weekly_seasonality"]

logger = logging.getLogger(__name__)

_NO_PATTERN = SeasonalityResult(has_pattern=False, pattern="none")


def weekday_expense_averages(flows: Iterable[DailyFlow]) -> dict[int, float]:
    """Return the mean daily expense for each weekday present in ``flows``."""

    records = [(flow.date.weekday(), flow.expenses) for flow in flows]
    if not records:
        return {}

    frame = pd.DataFrame(records, columns=["weekday", "expenses"])
    means = frame.groupby("weekday")["expenses"].mean()
    return {int(weekday): float(value) for weekday, value in means.items()}


def detect_weekly_seasonality(
    flows: Sequence[DailyFlow],
    settings: Optional[AnalyticsSettings] = None,
) -> SeasonalityResult:
    """Report a weekly pattern when weekday spend averages vary strongly."""

    settings = settings or get_settings()
    if len(flows) < settings.seasonality_min_days:
        return _NO_PATTERN

    averages = weekday_expense_averages(flows)
    variance = float(np.var(list(averages.values()))) if averages else 0.0

    logger.debug(
        "Weekday spend variance computed",
        extra={"variance": variance, "weekdays": len(averages)},
    )

    if variance > settings.seasonality_variance_threshold:
        return SeasonalityResult(
            has_pattern=True,
            pattern="weekly",
            weekday_averages=averages,
            variance=variance,
        )
    return SeasonalityResult(
        has_pattern=False,
        pattern="none",
        weekday_averages=averages,
        variance=variance,
    )
