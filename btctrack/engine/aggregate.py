"""Forward-filled portfolio value per aligned day."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, List

from btctrack.accounting.ledger import Ledger
from btctrack.engine.align import AlignedDay
from btctrack.engine.state import Holdings
from btctrack.engine.types import Currency
from btctrack.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PortfolioSnapshot:
    date: dt.date
    invested_to_date: float
    btc_held_to_date: float
    market_value: float

    @property
    def unrealized_pl(self) -> float:
        return self.market_value - self.invested_to_date


def accumulate(days: Iterable[AlignedDay], ledger: Ledger, currency: Currency = Currency.PRIMARY) -> List[PortfolioSnapshot]:
    """Return one snapshot per aligned day.

    Holdings on a day include every purchase dated on or before it, so the
    value is continuous between purchases and zero before the first one.
    """

    pending = ledger.transactions
    cursor = 0
    state = Holdings()
    snapshots: List[PortfolioSnapshot] = []
    for day in days:
        start = cursor
        while cursor < len(pending) and pending[cursor].date <= day.date:
            cursor += 1
        state = state.add_all(pending[start:cursor])
        snapshots.append(
            PortfolioSnapshot(
                date=day.date,
                invested_to_date=state.cost(currency),
                btc_held_to_date=state.btc,
                market_value=state.btc * day.price(currency),
            )
        )
    logger.debug("Accumulated %d snapshots in %s currency", len(snapshots), currency.value)
    return snapshots


__all__ = ["PortfolioSnapshot", "accumulate"]
