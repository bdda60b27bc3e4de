"""Merge the purchase ledger with the daily price series."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from btctrack.accounting.ledger import Ledger, Transaction
from btctrack.data.prices import PricePoint
from btctrack.engine.state import Holdings
from btctrack.engine.types import Currency
from btctrack.utils.logging import get_logger
from btctrack.utils.validation import assert_increasing_dates, find_date_gaps

logger = get_logger(__name__)


@dataclass(frozen=True)
class AlignedDay:
    """One calendar day of prices annotated with purchases and running cost basis."""

    date: dt.date
    price_primary: float
    price_secondary: float
    transactions: Tuple[Transaction, ...]
    cumulative_btc: float
    cumulative_cost_primary: float
    cumulative_cost_secondary: float
    dca_primary: float | None
    dca_secondary: float | None

    @property
    def has_transaction(self) -> bool:
        return bool(self.transactions)

    @property
    def transaction(self) -> Transaction | None:
        """Same-day purchases combined into one, or ``None``."""

        if not self.transactions:
            return None
        if len(self.transactions) == 1:
            return self.transactions[0]
        return Transaction.combine(self.transactions)

    def price(self, currency: Currency) -> float:
        if currency is Currency.PRIMARY:
            return self.price_primary
        return self.price_secondary

    def dca(self, currency: Currency) -> float | None:
        if currency is Currency.PRIMARY:
            return self.dca_primary
        return self.dca_secondary


def _aligned_day(point: PricePoint, state: Holdings, same_day: Tuple[Transaction, ...]) -> AlignedDay:
    return AlignedDay(
        date=point.date,
        price_primary=point.price_primary,
        price_secondary=point.price_secondary,
        transactions=same_day,
        cumulative_btc=state.btc,
        cumulative_cost_primary=state.cost_primary,
        cumulative_cost_secondary=state.cost_secondary,
        dca_primary=state.dca(Currency.PRIMARY),
        dca_secondary=state.dca(Currency.SECONDARY),
    )


def align(ledger: Ledger, prices: Iterable[PricePoint]) -> List[AlignedDay]:
    """Return one :class:`AlignedDay` per price point, in price order.

    Every ledger transaction dated on or before a day is folded into that
    day's holdings before its DCA is computed, so a purchase day already
    reflects its own purchase. Transactions dated before the first price
    point seed the opening holdings. Raises :class:`InvalidInputOrder` if the
    prices are not strictly increasing by date.
    """

    points = list(prices)
    dates = [point.date for point in points]
    assert_increasing_dates(dates)
    for before, after in find_date_gaps(dates):
        logger.warning("Price series skips days between %s and %s", before, after)

    pending = ledger.transactions
    cursor = 0
    state = Holdings()
    days: List[AlignedDay] = []
    for point in points:
        start = cursor
        while cursor < len(pending) and pending[cursor].date <= point.date:
            cursor += 1
        folded = pending[start:cursor]
        state = state.add_all(folded)
        same_day = tuple(item for item in folded if item.date == point.date)
        days.append(_aligned_day(point, state, same_day))

    if cursor < len(pending):
        logger.debug("%d transaction(s) dated after the last price point", len(pending) - cursor)
    logger.debug("Aligned %d days against %d transactions", len(days), len(ledger))
    return days


__all__ = ["AlignedDay", "align"]
