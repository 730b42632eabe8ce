"""Recurring expense detection helpers."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Iterable, Optional, Sequence

import numpy as np

from config.settings import AnalyticsSettings, get_settings
from core.formatting import round_half_up
from core.models import RecurrenceKey, RecurringExpenseRule, Transaction

__all__ = [
    "recurrence_key",
    "detect_recurring_expenses",
]

logger = logging.getLogger(__name__)


def recurrence_key(transaction: Transaction) -> RecurrenceKey:
    """Return the grouping key for an expense transaction."""

    description = (transaction.description or "").lower() or "unknown"
    return RecurrenceKey(description=description, category=transaction.category or "")


def detect_recurring_expenses(
    transactions: Iterable[Transaction],
    settings: Optional[AnalyticsSettings] = None,
) -> list[RecurringExpenseRule]:
    """Identify bills that repeat on a weekly, bi-weekly or monthly cadence.

    Parameters
    ----------
    transactions:
        Full transaction history. Only expenses (negative amounts) are used.
    settings:
        Supplies the accepted frequency bands and the variance multiplier.

    Returns
    -------
    list[RecurringExpenseRule]
        Rules sorted by next due date. Groups with fewer than two occurrences,
        an interval outside every band, or noisy intervals are dropped.
    """

    settings = settings or get_settings()

    groups: dict[RecurrenceKey, list[Transaction]] = {}
    for txn in transactions:
        if txn.amount >= 0:
            continue
        groups.setdefault(recurrence_key(txn), []).append(txn)

    rules: list[RecurringExpenseRule] = []
    for key, occurrences in groups.items():
        if len(occurrences) < 2:
            continue

        ordered = sorted(occurrences, key=lambda txn: txn.date, reverse=True)
        deltas = np.array(
            [abs((newer.date - older.date).days) for newer, older in zip(ordered, ordered[1:])],
            dtype=float,
        )

        frequency = round_half_up(float(deltas.mean()))
        variance = float(np.var(deltas))

        if not _resolve_interval(frequency, variance, settings):
            logger.debug(
                "Dropped irregular expense group",
                extra={"group": key.description, "frequency": frequency, "variance": variance},
            )
            continue

        last_date = ordered[0].date
        amounts = np.abs(np.array([txn.amount for txn in occurrences], dtype=float))
        rules.append(
            RecurringExpenseRule(
                description=key.description,
                average_amount=round_half_up(float(amounts.mean())),
                frequency_days=frequency,
                next_due_date=last_date + timedelta(days=frequency),
                last_date=last_date,
                occurrences=len(occurrences),
                category=occurrences[0].category,
            )
        )

    rules.sort(key=lambda rule: rule.next_due_date)
    return rules


def _resolve_interval(frequency: int, variance: float, settings: AnalyticsSettings) -> bool:
    """Return ``True`` when the cadence fits a supported band with low variance."""

    if not _in_band(frequency, settings.recurrence_bands):
        return False
    return variance < frequency * settings.recurrence_variance_multiplier


def _in_band(frequency: int, bands: Sequence[tuple[int, int]]) -> bool:
    return any(low <= frequency <= high for low, high in bands)
