"""Per-lot unrealized profit and loss."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from btctrack.accounting.ledger import Ledger, Transaction
from btctrack.engine.types import Currency, Ratio, ratio


@dataclass(frozen=True)
class LotResult:
    transaction: Transaction
    unit_price: float
    acquisition_cost: float
    current_value: float
    unrealized_pl: float
    unrealized_pl_percent: Ratio


@dataclass(frozen=True)
class TotalsResult:
    btc_amount: float
    acquisition_cost: float
    current_value: float
    average_cost: Ratio
    unrealized_pl: float
    unrealized_pl_percent: Ratio


def analyze_lot(transaction: Transaction, current_price: float, currency: Currency = Currency.PRIMARY) -> LotResult:
    cost = transaction.cost(currency)
    value = transaction.btc_amount * current_price
    pnl = value - cost
    return LotResult(
        transaction=transaction,
        unit_price=transaction.unit_price(currency),
        acquisition_cost=cost,
        current_value=value,
        unrealized_pl=pnl,
        unrealized_pl_percent=ratio(pnl, cost),
    )


def totals(lots: Iterable[LotResult]) -> TotalsResult:
    btc = 0.0
    cost = 0.0
    value = 0.0
    for lot in lots:
        btc += lot.transaction.btc_amount
        cost += lot.acquisition_cost
        value += lot.current_value
    pnl = value - cost
    return TotalsResult(
        btc_amount=btc,
        acquisition_cost=cost,
        current_value=value,
        average_cost=ratio(cost, btc),
        unrealized_pl=pnl,
        unrealized_pl_percent=ratio(pnl, cost),
    )


def analyze(ledger: Ledger, current_price: float, currency: Currency = Currency.PRIMARY) -> Tuple[List[LotResult], TotalsResult]:
    """Value every lot at ``current_price`` and sum the ledger.

    Lots come back in ledger order. P/L percentages are fractions (0.25 means
    25%) and are ``UNDEFINED`` for a zero-cost lot. The average cost is
    ``UNDEFINED`` for an empty ledger.
    """

    lots = [analyze_lot(transaction, current_price, currency) for transaction in ledger]
    return lots, totals(lots)


def newest_first(lots: Iterable[LotResult]) -> List[LotResult]:
    """Return lots ordered newest purchase first, for display."""

    return sorted(lots, key=lambda lot: lot.transaction.date, reverse=True)


__all__ = ["LotResult", "TotalsResult", "analyze_lot", "totals", "analyze", "newest_first"]
