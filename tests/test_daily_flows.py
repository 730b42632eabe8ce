"""Tests for daily aggregation and trend estimation."""

from __future__ import annotations

import random
from datetime import date, timedelta

import pytest

from analytics.daily_flows import aggregate_daily_flows, net_flow_series
from analytics.trend import (
    classify_trend,
    exponential_moving_average,
    linear_slope,
    moving_average,
)
from config.settings import AnalyticsSettings
from core.exceptions import InvalidParameterError
from core.models import Transaction


def _random_transactions(seed: int, count: int = 60) -> list[Transaction]:
    rng = random.Random(seed)
    start = date(2025, 1, 1)
    return [
        Transaction(
            amount=rng.choice([-1, 1]) * rng.randint(1, 5000),
            date=start + timedelta(days=rng.randint(0, 20)),
        )
        for _ in range(count)
    ]


def test_aggregate_daily_flows_empty():
    assert aggregate_daily_flows([]) == []


def test_aggregate_daily_flows_groups_by_day():
    transactions = [
        Transaction(amount=-150, date=date(2025, 1, 3)),
        Transaction(amount=1000, date=date(2025, 1, 1)),
        Transaction(amount=-250, date=date(2025, 1, 1)),
        Transaction(amount=-50, date=date(2025, 1, 3)),
    ]

    flows = aggregate_daily_flows(transactions)

    assert [flow.date for flow in flows] == [date(2025, 1, 1), date(2025, 1, 3)]
    assert flows[0].income == pytest.approx(1000)
    assert flows[0].expenses == pytest.approx(250)
    assert flows[0].net_flow == pytest.approx(750)
    assert flows[1].income == 0
    assert flows[1].expenses == pytest.approx(200)
    assert flows[1].net_flow == pytest.approx(-200)


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_aggregate_daily_flows_properties(seed):
    transactions = _random_transactions(seed)

    flows = aggregate_daily_flows(transactions)
    dates = [flow.date for flow in flows]

    assert dates == sorted(set(dates))
    assert all(flow.net_flow == flow.income - flow.expenses for flow in flows)
    assert sum(flow.income for flow in flows) == pytest.approx(
        sum(txn.amount for txn in transactions if txn.amount > 0)
    )
    assert sum(flow.expenses for flow in flows) == pytest.approx(
        sum(-txn.amount for txn in transactions if txn.amount < 0)
    )


def test_aggregate_daily_flows_is_order_independent():
    transactions = _random_transactions(3)
    shuffled = list(reversed(transactions))

    forward = aggregate_daily_flows(transactions)
    backward = aggregate_daily_flows(shuffled)

    assert [flow.date for flow in forward] == [flow.date for flow in backward]
    assert net_flow_series(forward) == pytest.approx(net_flow_series(backward))


def test_moving_average_examples():
    assert moving_average([10, 20, 30], 2) == pytest.approx(25)
    assert moving_average([], 3) == 0
    assert moving_average([10, 20, 30], 10) == pytest.approx(20)


def test_moving_average_rejects_empty_window():
    with pytest.raises(InvalidParameterError):
        moving_average([1, 2, 3], 0)


def test_exponential_moving_average_edges():
    assert exponential_moving_average([]) == []
    assert exponential_moving_average([42.0]) == [42.0]


def test_exponential_moving_average_default_alpha():
    ema = exponential_moving_average([100, 200])

    assert ema[0] == pytest.approx(100)
    assert ema[1] == pytest.approx(0.3 * 200 + 0.7 * 100)


def test_exponential_moving_average_uses_settings_alpha():
    ema = exponential_moving_average([0, 100], settings=AnalyticsSettings(ema_alpha=0.5))

    assert ema == pytest.approx([0, 50])


def test_exponential_moving_average_rejects_bad_alpha():
    with pytest.raises(InvalidParameterError):
        exponential_moving_average([1, 2], alpha=1.5)


def test_linear_slope_of_straight_line():
    assert linear_slope([5, 15, 25, 35, 45]) == pytest.approx(10)
    assert linear_slope([7]) == 0


@pytest.mark.parametrize(
    "values",
    [[], [1000], [0, 1000, 2000, 3000], [5000, -5000, 5000, -5000]],
)
def test_classify_trend_is_stable_below_five_points(values, settings):
    assert classify_trend(values, settings) == "stable"


def test_classify_trend_thresholds(settings):
    assert classify_trend([0, 100, 200, 300, 400], settings) == "improving"
    assert classify_trend([400, 300, 200, 100, 0], settings) == "declining"
    assert classify_trend([0, 40, 80, 120, 160], settings) == "stable"


def test_classify_trend_threshold_is_configurable():
    settings = AnalyticsSettings(trend_slope_threshold=30)

    assert classify_trend([0, 40, 80, 120, 160], settings) == "improving"
