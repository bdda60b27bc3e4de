"""Fetch the daily BTC price history for a ledger and store it as CSV."""

from __future__ import annotations

import argparse
import datetime as dt
from pathlib import Path

from btctrack.config import load_config
from btctrack.data.market_data import fetch_price_history, history_window
from btctrack.utils.io import load_ledger, save_price_series


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch daily BTC prices covering a ledger.")
    parser.add_argument("ledger", type=Path, help="Ledger YAML or CSV")
    parser.add_argument("--config", type=Path, default=None, help="Configuration YAML")
    parser.add_argument("--today", type=dt.date.fromisoformat, default=None, help="Last day to fetch (YYYY-MM-DD)")
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("data/prices.csv"),
        help="Destination CSV",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    cfg = load_config(args.config)
    ledger = load_ledger(args.ledger)
    start, end = history_window(ledger, args.today, padding_days=cfg.windows.history_padding_days)
    prices = fetch_price_history(
        start,
        end,
        currencies=(cfg.currencies.primary, cfg.currencies.secondary),
        asset=cfg.market_data.asset,
        base_url=cfg.market_data.base_url,
        timeout=cfg.market_data.timeout_seconds,
    )
    path = save_price_series(prices, args.out)
    print(f"Saved {len(prices)} daily prices ({start} -> {end}) to {path}")


if __name__ == "__main__":
    main()
