"""Purchase ledger for BTC accumulation."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from itertools import groupby
from typing import Any, Dict, Iterable, Iterator, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from btctrack.engine.types import Currency
from btctrack.errors import InvalidLedgerEntry


class TransactionRecord(BaseModel):
    """Raw ledger record as read from a ledger file."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    date: dt.date
    btc_amount: float = Field(..., gt=0, description="BTC acquired")
    cost_primary: float = Field(..., ge=0, description="Cost paid in the primary currency")
    cost_secondary: float = Field(..., ge=0, description="Cost paid in the secondary currency")


@dataclass(frozen=True)
class Transaction:
    """A single purchase (lot)."""

    date: dt.date
    btc_amount: float
    cost_primary: float
    cost_secondary: float

    def cost(self, currency: Currency) -> float:
        if currency is Currency.PRIMARY:
            return self.cost_primary
        return self.cost_secondary

    def unit_price(self, currency: Currency) -> float:
        return self.cost(currency) / self.btc_amount

    @classmethod
    def combine(cls, transactions: Iterable["Transaction"]) -> "Transaction":
        """Merge same-day purchases into one transaction."""

        items = list(transactions)
        if not items:
            raise ValueError("Cannot combine an empty group of transactions")
        dates = {item.date for item in items}
        if len(dates) != 1:
            raise ValueError(f"Transactions span several dates: {sorted(dates)}")
        return cls(
            date=items[0].date,
            btc_amount=sum(item.btc_amount for item in items),
            cost_primary=sum(item.cost_primary for item in items),
            cost_secondary=sum(item.cost_secondary for item in items),
        )


@dataclass(frozen=True)
class Ledger:
    """Immutable, date-ordered collection of purchases."""

    transactions: Tuple[Transaction, ...] = ()

    def __post_init__(self) -> None:
        # sorted() is stable, so same-day entries keep their ledger order
        ordered = tuple(sorted(self.transactions, key=lambda item: item.date))
        object.__setattr__(self, "transactions", ordered)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "Ledger":
        """Validate raw records and build a ledger.

        Raises :class:`InvalidLedgerEntry` on the first record that has a
        non-positive or non-finite BTC amount, a negative or non-finite cost,
        a missing field or a date that does not parse as an ISO calendar day.
        """

        transactions = []
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise InvalidLedgerEntry(f"expected a mapping, received {record!r}", index)
            try:
                parsed = TransactionRecord.model_validate(dict(record))
            except ValidationError as exc:
                problems = "; ".join(
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
                )
                raise InvalidLedgerEntry(problems, index) from exc
            transactions.append(
                Transaction(
                    date=parsed.date,
                    btc_amount=parsed.btc_amount,
                    cost_primary=parsed.cost_primary,
                    cost_secondary=parsed.cost_secondary,
                )
            )
        return cls(tuple(transactions))

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    @property
    def is_empty(self) -> bool:
        return not self.transactions

    @property
    def first_date(self) -> dt.date | None:
        return self.transactions[0].date if self.transactions else None

    def by_date(self) -> Dict[dt.date, Tuple[Transaction, ...]]:
        """Group transactions by calendar day, preserving ledger order."""

        return {day: tuple(group) for day, group in groupby(self.transactions, key=lambda item: item.date)}

    def total_btc(self) -> float:
        return sum(item.btc_amount for item in self.transactions)

    def total_cost(self, currency: Currency) -> float:
        return sum(item.cost(currency) for item in self.transactions)

    def until(self, day: dt.date) -> "Ledger":
        """Return the ledger truncated to transactions dated on or before ``day``."""

        return Ledger(tuple(item for item in self.transactions if item.date <= day))


__all__ = ["TransactionRecord", "Transaction", "Ledger"]
