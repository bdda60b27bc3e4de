"""Tabular views of engine results."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

import pandas as pd

from btctrack.engine.aggregate import PortfolioSnapshot
from btctrack.engine.align import AlignedDay
from btctrack.engine.lots import LotResult, TotalsResult
from btctrack.engine.performance import PerformanceWindows
from btctrack.engine.types import Currency, Ratio, is_undefined


def _value(value: Ratio | None) -> Optional[float]:
    if value is None or is_undefined(value):
        return None
    return float(value)


def days_frame(days: Iterable[AlignedDay]) -> pd.DataFrame:
    """One row per aligned day; same-day purchases are summed."""

    rows = []
    for day in days:
        combined = day.transaction
        rows.append(
            {
                "date": day.date,
                "price_primary": day.price_primary,
                "price_secondary": day.price_secondary,
                "has_transaction": day.has_transaction,
                "transactions": len(day.transactions),
                "btc_bought": combined.btc_amount if combined else 0.0,
                "cumulative_btc": day.cumulative_btc,
                "dca_primary": day.dca_primary,
                "dca_secondary": day.dca_secondary,
            }
        )
    columns = [
        "date",
        "price_primary",
        "price_secondary",
        "has_transaction",
        "transactions",
        "btc_bought",
        "cumulative_btc",
        "dca_primary",
        "dca_secondary",
    ]
    return pd.DataFrame(rows, columns=columns)


def snapshots_frame(snapshots: Iterable[PortfolioSnapshot]) -> pd.DataFrame:
    rows = [
        {
            "date": snap.date,
            "invested_to_date": snap.invested_to_date,
            "btc_held_to_date": snap.btc_held_to_date,
            "market_value": snap.market_value,
            "unrealized_pl": snap.unrealized_pl,
        }
        for snap in snapshots
    ]
    return pd.DataFrame(rows, columns=["date", "invested_to_date", "btc_held_to_date", "market_value", "unrealized_pl"])


def windows_frame(windows: PerformanceWindows) -> pd.DataFrame:
    rows = []
    for name, window in (("daily", windows.daily), ("weekly", windows.weekly)):
        rows.append(
            {
                "window": name,
                "lookback_days": window.lookback_days,
                "previous_price": window.previous_price,
                "price_change": window.price_change,
                "price_change_percent": _value(window.price_change_percent),
                "portfolio_change": window.portfolio_change,
                "portfolio_change_percent": _value(window.portfolio_change_percent),
            }
        )
    return pd.DataFrame(rows)


def lots_frame(lots: Sequence[LotResult], currency: Currency = Currency.PRIMARY) -> pd.DataFrame:
    rows = [
        {
            "date": lot.transaction.date,
            "currency": currency.value,
            "btc_amount": lot.transaction.btc_amount,
            "unit_price": lot.unit_price,
            "acquisition_cost": lot.acquisition_cost,
            "current_value": lot.current_value,
            "unrealized_pl": lot.unrealized_pl,
            "unrealized_pl_percent": _value(lot.unrealized_pl_percent),
        }
        for lot in lots
    ]
    columns = [
        "date",
        "currency",
        "btc_amount",
        "unit_price",
        "acquisition_cost",
        "current_value",
        "unrealized_pl",
        "unrealized_pl_percent",
    ]
    return pd.DataFrame(rows, columns=columns)


def totals_frame(totals: TotalsResult) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "metric": [
                "btc_amount",
                "acquisition_cost",
                "current_value",
                "average_cost",
                "unrealized_pl",
                "unrealized_pl_percent",
            ],
            "value": [
                totals.btc_amount,
                totals.acquisition_cost,
                totals.current_value,
                _value(totals.average_cost),
                totals.unrealized_pl,
                _value(totals.unrealized_pl_percent),
            ],
        }
    )


__all__ = ["days_frame", "snapshots_frame", "windows_frame", "lots_frame", "totals_frame"]
