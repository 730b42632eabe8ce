"""Daily cash-flow aggregation."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from core.data_loader import build_transaction_frame
from core.models import DailyFlow, Transaction

__all__ = ["aggregate_daily_flows", "net_flow_series"]


def aggregate_daily_flows(transactions: Iterable[Transaction]) -> list[DailyFlow]:
    """Collapse transactions into one flow record per calendar day.

    Days without transactions are not materialised. The result is sorted by
    date ascending and ``net_flow`` is always ``income - expenses``.
    """

    frame = build_transaction_frame(transactions)
    if frame.empty:
        return []

    frame["income"] = np.where(frame["amount"] > 0, frame["amount"], 0.0)
    frame["expenses"] = np.where(frame["amount"] > 0, 0.0, frame["amount"].abs())

    grouped = frame.groupby("date", sort=True)[["income", "expenses"]].sum()

    flows: list[DailyFlow] = []
    for day, row in grouped.iterrows():
        income = float(row["income"])
        expenses = float(row["expenses"])
        flows.append(
            DailyFlow(
                date=pd.Timestamp(day).date(),
                income=income,
                expenses=expenses,
                net_flow=income - expenses,
            )
        )
    return flows


def net_flow_series(flows: Iterable[DailyFlow]) -> list[float]:
    return [flow.net_flow for flow in flows]
