"""Daily and weekly performance deltas against the live quote."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from btctrack.engine.align import AlignedDay
from btctrack.engine.types import Currency, Ratio, ratio


@dataclass(frozen=True)
class PerformanceWindow:
    lookback_days: int
    previous_price: float
    price_change: float
    price_change_percent: Ratio
    portfolio_change: float
    portfolio_change_percent: Ratio


@dataclass(frozen=True)
class PerformanceWindows:
    daily: PerformanceWindow
    weekly: PerformanceWindow


def previous_price(days: Sequence[AlignedDay], lookback: int, current_price: float, currency: Currency) -> float:
    """Price ``lookback`` days before the latest day, or ``current_price`` if out of range."""

    index = len(days) - 1 - lookback
    if index < 0:
        return current_price
    return days[index].price(currency)


def window(
    days: Sequence[AlignedDay],
    lookback: int,
    current_price: float,
    btc_held_total: float,
    currency: Currency = Currency.PRIMARY,
) -> PerformanceWindow:
    if lookback < 1:
        raise ValueError(f"lookback must be at least one day, received {lookback}")
    baseline = previous_price(days, lookback, current_price, currency)
    change = current_price - baseline
    percent = ratio(change, baseline, scale=100.0)
    # holdings are treated as constant across the window
    return PerformanceWindow(
        lookback_days=lookback,
        previous_price=baseline,
        price_change=change,
        price_change_percent=percent,
        portfolio_change=change * btc_held_total,
        portfolio_change_percent=percent,
    )


def compute_windows(
    days: Sequence[AlignedDay],
    current_price: float,
    btc_held_total: float,
    currency: Currency = Currency.PRIMARY,
    *,
    daily_lookback: int = 1,
    weekly_lookback: int = 7,
) -> PerformanceWindows:
    """Return the daily and weekly windows.

    The daily baseline is the second-to-last aligned day and the weekly
    baseline sits seven days before the last one. A sequence too short for a
    baseline yields a zero change rather than an error. Percentages are
    ``UNDEFINED`` when the baseline price is zero.
    """

    return PerformanceWindows(
        daily=window(days, daily_lookback, current_price, btc_held_total, currency),
        weekly=window(days, weekly_lookback, current_price, btc_held_total, currency),
    )


__all__ = ["PerformanceWindow", "PerformanceWindows", "previous_price", "window", "compute_windows"]
