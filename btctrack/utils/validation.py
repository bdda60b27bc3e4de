"""Validation helpers."""

from __future__ import annotations

import datetime as dt
import math
from typing import List, Sequence, Tuple

from btctrack.config import Config
from btctrack.errors import InvalidInputOrder


def assert_positive(value: float, name: str) -> None:
    """Ensure value is finite and strictly positive."""

    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a finite positive number, received {value}")


def assert_increasing_dates(dates: Sequence[dt.date]) -> None:
    """Ensure dates are strictly increasing (no regressions, no duplicates)."""

    for index in range(1, len(dates)):
        if dates[index] <= dates[index - 1]:
            raise InvalidInputOrder(
                f"Price series must be strictly increasing by date: "
                f"{dates[index]} at position {index} follows {dates[index - 1]}"
            )


def find_date_gaps(dates: Sequence[dt.date]) -> List[Tuple[dt.date, dt.date]]:
    """Return ``(before, after)`` pairs where consecutive dates skip a calendar day."""

    one_day = dt.timedelta(days=1)
    return [(dates[i - 1], dates[i]) for i in range(1, len(dates)) if dates[i] - dates[i - 1] > one_day]


def validate_config(config: Config) -> None:
    """Run cross-field checks pydantic cannot express on a single field."""

    if config.currencies.primary == config.currencies.secondary:
        raise ValueError("Primary and secondary currencies must differ")
    if config.windows.weekly_lookback <= config.windows.daily_lookback:
        raise ValueError("Weekly lookback must be longer than the daily lookback")


__all__ = ["assert_positive", "assert_increasing_dates", "find_date_gaps", "validate_config"]
