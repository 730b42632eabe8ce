"""Application configuration utilities."""

from .settings import (
    DEFAULT_PROJECTION_DAYS,
    DEFAULT_RECURRENCE_BANDS,
    DEFAULT_SAFETY_THRESHOLD,
    AnalyticsSettings,
    get_settings,
)

__all__ = [
    "DEFAULT_PROJECTION_DAYS",
    "DEFAULT_RECURRENCE_BANDS",
    "DEFAULT_SAFETY_THRESHOLD",
    "AnalyticsSettings",
    "get_settings",
]
