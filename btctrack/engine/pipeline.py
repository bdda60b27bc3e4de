"""Single entry point that recomputes every portfolio view for one refresh."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from btctrack.accounting.ledger import Ledger
from btctrack.data.prices import PricePoint, Quote
from btctrack.engine.aggregate import PortfolioSnapshot, accumulate
from btctrack.engine.align import AlignedDay, align
from btctrack.engine.lots import LotResult, TotalsResult, analyze
from btctrack.engine.performance import PerformanceWindows, compute_windows
from btctrack.engine.types import Currency


@dataclass(frozen=True)
class PortfolioReport:
    currency: Currency
    current_price: float
    days: Tuple[AlignedDay, ...]
    snapshots: Tuple[PortfolioSnapshot, ...]
    windows: PerformanceWindows
    lots: Tuple[LotResult, ...]
    totals: TotalsResult

    @property
    def latest_snapshot(self) -> PortfolioSnapshot | None:
        return self.snapshots[-1] if self.snapshots else None


def evaluate(
    ledger: Ledger,
    prices: Iterable[PricePoint],
    quote: Quote,
    currency: Currency = Currency.PRIMARY,
    *,
    daily_lookback: int = 1,
    weekly_lookback: int = 7,
) -> PortfolioReport:
    """Align, aggregate, and value the portfolio from scratch."""

    current_price = quote.price(currency)
    days = align(ledger, prices)
    snapshots = accumulate(days, ledger, currency)
    windows = compute_windows(
        days,
        current_price,
        ledger.total_btc(),
        currency,
        daily_lookback=daily_lookback,
        weekly_lookback=weekly_lookback,
    )
    lots, totals = analyze(ledger, current_price, currency)
    return PortfolioReport(
        currency=currency,
        current_price=current_price,
        days=tuple(days),
        snapshots=tuple(snapshots),
        windows=windows,
        lots=tuple(lots),
        totals=totals,
    )


__all__ = ["PortfolioReport", "evaluate"]
