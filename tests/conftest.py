import datetime as dt
from typing import Dict, List

import pytest

from btctrack.accounting.ledger import Ledger
from btctrack.data.prices import PricePoint, PriceSeries


def daily_series(start: dt.date, end: dt.date, primary: float, secondary: float, overrides: Dict[dt.date, float] | None = None) -> PriceSeries:
    """Flat daily series; ``overrides`` replaces the primary price (secondary scales with it)."""

    overrides = overrides or {}
    points: List[PricePoint] = []
    day = start
    while day <= end:
        price = overrides.get(day, primary)
        points.append(PricePoint(date=day, price_primary=price, price_secondary=secondary * price / primary))
        day += dt.timedelta(days=1)
    return PriceSeries.from_points(points)


@pytest.fixture
def scenario_ledger() -> Ledger:
    return Ledger.from_records(
        [
            {"date": "2024-01-01", "btc_amount": 0.1, "cost_primary": 4000, "cost_secondary": 20000},
            {"date": "2024-01-10", "btc_amount": 0.05, "cost_primary": 2500, "cost_secondary": 12500},
        ]
    )


@pytest.fixture
def scenario_prices() -> PriceSeries:
    return daily_series(
        dt.date(2023, 12, 17),
        dt.date(2024, 1, 10),
        primary=40_000.0,
        secondary=200_000.0,
        overrides={dt.date(2024, 1, 10): 50_000.0},
    )


@pytest.fixture
def make_series():
    return daily_series
