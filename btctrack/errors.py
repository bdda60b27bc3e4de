"""Exceptions raised by btctrack."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for structural input errors."""


class InvalidLedgerEntry(TrackerError, ValueError):
    """A ledger record failed validation at load time."""

    def __init__(self, message: str, index: int | None = None) -> None:
        self.index = index
        if index is not None:
            message = f"Ledger entry {index}: {message}"
        super().__init__(message)


class InvalidInputOrder(TrackerError, ValueError):
    """A price series was not strictly increasing in date."""


__all__ = ["TrackerError", "InvalidLedgerEntry", "InvalidInputOrder"]
