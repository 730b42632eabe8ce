"""Moving averages and linear-regression trend classification."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from config.settings import AnalyticsSettings, get_settings
from core.exceptions import InvalidParameterError
from core.models import TrendLabel

__all__ = [
    "moving_average",
    "exponential_moving_average",
    "linear_slope",
    "classify_trend",
]

logger = logging.getLogger(__name__)


def moving_average(values: Sequence[float], window_size: int) -> float:
    """Return the mean of the last ``window_size`` values.

    Parameters
    ----------
    values:
        Arbitrary numeric series, oldest first.
    window_size:
        Number of trailing values to average. Windows larger than the series
        average everything available.

    Returns
    -------
    float
        The trailing mean, or ``0.0`` for an empty series.
    """

    if window_size < 1:
        raise InvalidParameterError("window_size must be at least 1")
    if len(values) == 0:
        return 0.0

    window = np.asarray(values[-window_size:], dtype=float)
    return float(window.mean())


def exponential_moving_average(
    values: Sequence[float],
    alpha: Optional[float] = None,
    *,
    settings: Optional[AnalyticsSettings] = None,
) -> list[float]:
    """Return the exponential moving average of ``values`` seeded with the first value."""

    if alpha is None:
        alpha = (settings or get_settings()).ema_alpha
    if not 0 < alpha <= 1:
        raise InvalidParameterError("alpha must be within (0, 1]")
    if len(values) == 0:
        return []

    ema = [float(values[0])]
    for value in values[1:]:
        ema.append(alpha * float(value) + (1 - alpha) * ema[-1])
    return ema


def linear_slope(values: Sequence[float]) -> float:
    """Ordinary least-squares slope of ``values`` against their index."""

    n = len(values)
    if n < 2:
        return 0.0

    y = np.asarray(values, dtype=float)
    x = np.arange(n, dtype=float)
    denominator = n * float((x * x).sum()) - float(x.sum()) ** 2
    if denominator == 0:
        return 0.0
    return (n * float((x * y).sum()) - float(x.sum()) * float(y.sum())) / denominator


def classify_trend(
    values: Sequence[float],
    settings: Optional[AnalyticsSettings] = None,
) -> TrendLabel:
    """Label a net-flow series as improving, stable or declining."""

    settings = settings or get_settings()
    if len(values) < settings.trend_min_points:
        return "stable"

    slope = linear_slope(values)
    logger.debug("Trend slope computed", extra={"slope": slope, "points": len(values)})

    if slope > settings.trend_slope_threshold:
        return "improving"
    if slope < -settings.trend_slope_threshold:
        return "declining"
    return "stable"
