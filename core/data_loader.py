"""Transaction coercion utilities for FlowCast's analytics pipeline."""

from __future__ import annotations

from typing import Any, Final, Iterable, Mapping, Union

import pandas as pd

from core.models import Transaction

__all__ = ["coerce_transactions", "build_transaction_frame"]


FRAME_COLUMNS: Final[tuple[str, ...]] = (
    "date",
    "amount",
    "category",
    "description",
    "merchant_name",
)

TransactionLike = Union[Transaction, Mapping[str, Any]]


def coerce_transactions(records: Iterable[TransactionLike]) -> list[Transaction]:
    """Return ``Transaction`` objects for a mix of transactions and raw mappings.

    Raw mappings are validated with :meth:`Transaction.from_mapping`, which
    raises :class:`core.exceptions.MalformedTransactionError` on bad input.
    """

    transactions: list[Transaction] = []
    for record in records:
        if isinstance(record, Transaction):
            transactions.append(record)
        else:
            transactions.append(Transaction.from_mapping(record))
    return transactions


def build_transaction_frame(transactions: Iterable[Any]) -> pd.DataFrame:
    """Return a dataframe view of transaction-like objects.

    The ``date`` column holds normalised timestamps so frames can be grouped
    by calendar day. Any object exposing ``amount`` and ``date`` attributes is
    accepted, including categorisation results.
    """

    rows = [
        {
            "date": txn.date,
            "amount": float(txn.amount),
            "category": getattr(txn, "category", None),
            "description": getattr(txn, "description", None),
            "merchant_name": getattr(txn, "merchant_name", None),
        }
        for txn in transactions
    ]
    if not rows:
        frame = pd.DataFrame({column: pd.Series(dtype=object) for column in FRAME_COLUMNS})
        frame["date"] = pd.to_datetime(frame["date"])
        frame["amount"] = frame["amount"].astype(float)
        return frame

    frame = pd.DataFrame(rows, columns=list(FRAME_COLUMNS))
    frame["date"] = pd.to_datetime(frame["date"]).dt.normalize()
    return frame
