"""Tabular analytics for btctrack."""

from .frames import days_frame, lots_frame, snapshots_frame, totals_frame, windows_frame

__all__ = [
    "days_frame",
    "snapshots_frame",
    "windows_frame",
    "lots_frame",
    "totals_frame",
]
