"""Daily price observations and live quotes."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple, overload

from btctrack.engine.types import Currency


@dataclass(frozen=True)
class PricePoint:
    """One daily observation in both quote currencies."""

    date: dt.date
    price_primary: float
    price_secondary: float

    def price(self, currency: Currency) -> float:
        if currency is Currency.PRIMARY:
            return self.price_primary
        return self.price_secondary


@dataclass(frozen=True)
class PriceSeries:
    """Ordered daily prices. Order is checked by the aligner, not here."""

    points: Tuple[PricePoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    @classmethod
    def from_points(cls, points: Iterable[PricePoint]) -> "PriceSeries":
        return cls(tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)

    @overload
    def __getitem__(self, index: int) -> PricePoint: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[PricePoint, ...]: ...

    def __getitem__(self, index):
        return self.points[index]

    def dates(self) -> List[dt.date]:
        return [point.date for point in self.points]


@dataclass(frozen=True)
class Quote:
    """Live price in both quote currencies, always representing now."""

    primary: float
    secondary: float

    def price(self, currency: Currency) -> float:
        if currency is Currency.PRIMARY:
            return self.primary
        return self.secondary


__all__ = ["PricePoint", "PriceSeries", "Quote"]
