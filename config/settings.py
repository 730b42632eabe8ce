"""Centralised configuration handling for FlowCast."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROJECTION_DAYS = 7
DEFAULT_SAFETY_THRESHOLD = 5000.0
DEFAULT_RECURRENCE_BANDS: tuple[tuple[int, int], ...] = ((5, 9), (12, 16), (25, 35))


class AnalyticsSettings(BaseSettings):
    """Tunable thresholds for the forecasting and categorisation engines.

    The defaults are calibrated for Indian Rupee magnitudes. Every value can be
    overridden with a ``FLOWCAST_``-prefixed environment variable or by
    constructing the settings object directly.
    """

    # Projection
    projection_days: int = DEFAULT_PROJECTION_DAYS
    safety_threshold: float = DEFAULT_SAFETY_THRESHOLD
    recent_window_days: int = 21

    # Trend
    ema_alpha: float = 0.3
    trend_min_points: int = 5
    trend_slope_threshold: float = 50.0
    trend_daily_adjustment: float = 10.0

    # Seasonality
    seasonality_min_days: int = 28
    seasonality_variance_threshold: float = 1000.0

    # Recurring expenses
    recurrence_bands: tuple[tuple[int, int], ...] = DEFAULT_RECURRENCE_BANDS
    recurrence_variance_multiplier: float = 5.0

    # Income cycle
    default_income_cycle_days: int = 7
    income_variance_scale: float = 10000.0
    upcoming_income_min_confidence: float = 0.5

    # Projection confidence tiers
    confidence_high_min_points: int = 21
    confidence_high_max_variance: float = 1000.0
    confidence_medium_min_points: int = 14
    confidence_medium_max_variance: float = 3000.0

    # Categorisation and anomalies
    income_high_amount: float = 1000.0
    anomaly_medium_multiplier: float = 2.0
    anomaly_high_multiplier: float = 3.0

    # Spending velocity
    velocity_increase_ratio: float = 1.2
    velocity_decrease_ratio: float = 0.8
    velocity_high_risk: float = 1000.0
    velocity_medium_risk: float = 800.0

    currency_symbol: str = "₹"
    service_name: str = "flowcast"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FLOWCAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("ema_alpha")
    @classmethod
    def _check_alpha(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError("ema_alpha must be within (0, 1]")
        return value

    @field_validator("recurrence_bands")
    @classmethod
    def _check_bands(cls, value: tuple[tuple[int, int], ...]) -> tuple[tuple[int, int], ...]:
        for low, high in value:
            if low > high:
                raise ValueError(f"invalid recurrence band {low}-{high}")
        return value

    @field_validator("projection_days", "recent_window_days", "default_income_cycle_days")
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be a positive number of days")
        return value


@lru_cache
def get_settings() -> AnalyticsSettings:
    """Load and cache analytics settings."""

    return AnalyticsSettings()
