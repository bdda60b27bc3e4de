"""Shared value types for the analytics engine."""

from __future__ import annotations

from enum import Enum
from typing import Union


class Currency(str, Enum):
    """Quote currency selector."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class Undefined(Enum):
    """Result of a ratio whose denominator is zero.

    ``UNDEFINED`` is falsy and supports no arithmetic, so it cannot be folded
    into a later number by accident.
    """

    UNDEFINED = "undefined"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = Undefined.UNDEFINED

Ratio = Union[float, Undefined]


def ratio(numerator: float, denominator: float, scale: float = 1.0) -> Ratio:
    """Return ``numerator / denominator * scale`` or ``UNDEFINED`` on a zero denominator."""

    if denominator == 0:
        return UNDEFINED
    return numerator / denominator * scale


def is_undefined(value: object) -> bool:
    return value is UNDEFINED


__all__ = ["Currency", "Undefined", "UNDEFINED", "Ratio", "ratio", "is_undefined"]
