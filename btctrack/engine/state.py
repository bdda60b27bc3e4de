"""Running holdings state carried through the daily fold."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from btctrack.accounting.ledger import Transaction
from btctrack.engine.types import Currency


@dataclass(frozen=True)
class Holdings:
    """Immutable accumulator of BTC held and capital invested."""

    btc: float = 0.0
    cost_primary: float = 0.0
    cost_secondary: float = 0.0

    def add(self, transaction: Transaction) -> "Holdings":
        return Holdings(
            btc=self.btc + transaction.btc_amount,
            cost_primary=self.cost_primary + transaction.cost_primary,
            cost_secondary=self.cost_secondary + transaction.cost_secondary,
        )

    def add_all(self, transactions: Iterable[Transaction]) -> "Holdings":
        state = self
        for transaction in transactions:
            state = state.add(transaction)
        return state

    def cost(self, currency: Currency) -> float:
        if currency is Currency.PRIMARY:
            return self.cost_primary
        return self.cost_secondary

    def dca(self, currency: Currency) -> float | None:
        """Average cost per BTC, ``None`` until something is held."""

        if self.btc <= 0:
            return None
        return self.cost(currency) / self.btc


__all__ = ["Holdings"]
