"""Market data helpers (live quote and daily history via CoinGecko)."""

from __future__ import annotations

import datetime as dt
from typing import Any, Tuple

import pandas as pd
import requests

from btctrack.accounting.ledger import Ledger
from btctrack.data.prices import PricePoint, PriceSeries, Quote
from btctrack.utils.logging import get_logger

COINGECKO_URL = "https://api.coingecko.com/api/v3"
HEADERS = {"Accept": "application/json"}
USER_AGENT = "btctrack/0.1"

logger = get_logger(__name__)


def _get_json(url: str, params: dict[str, Any], timeout: float) -> Any:
    headers = dict(HEADERS, **{"User-Agent": USER_AGENT})
    response = requests.get(url, params=params, headers=headers, timeout=timeout)
    response.raise_for_status()
    return response.json()


def fetch_quote(
    currencies: Tuple[str, str] = ("usd", "brl"),
    asset: str = "bitcoin",
    base_url: str = COINGECKO_URL,
    timeout: float = 10.0,
) -> Quote:
    """Fetch the current spot price in both quote currencies."""

    primary, secondary = currencies
    params = {"ids": asset, "vs_currencies": f"{primary},{secondary}"}
    data: dict[str, Any] = _get_json(f"{base_url}/simple/price", params, timeout)
    try:
        quote = Quote(primary=float(data[asset][primary]), secondary=float(data[asset][secondary]))
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Unexpected response format: {data}") from exc
    logger.info("Fetched %s quote: %s %.2f / %s %.2f", asset, primary, quote.primary, secondary, quote.secondary)
    return quote


def _daily_closes(payload: Any, column: str) -> pd.Series:
    try:
        raw = pd.DataFrame(payload["prices"], columns=["timestamp_ms", column])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Unexpected response format: {payload}") from exc
    raw["date"] = pd.to_datetime(raw["timestamp_ms"], unit="ms", utc=True).dt.date
    return raw.groupby("date")[column].last()


def fetch_price_history(
    start: dt.date,
    end: dt.date,
    currencies: Tuple[str, str] = ("usd", "brl"),
    asset: str = "bitcoin",
    base_url: str = COINGECKO_URL,
    timeout: float = 10.0,
) -> PriceSeries:
    """Fetch daily prices for ``[start, end]``, keeping the last observation of each UTC day."""

    if end < start:
        raise ValueError(f"end {end} precedes start {start}")
    begin = dt.datetime.combine(start, dt.time.min, tzinfo=dt.timezone.utc)
    finish = dt.datetime.combine(end, dt.time.max, tzinfo=dt.timezone.utc)
    url = f"{base_url}/coins/{asset}/market_chart/range"
    closes = []
    for column, code in zip(("price_primary", "price_secondary"), currencies):
        params = {"vs_currency": code, "from": int(begin.timestamp()), "to": int(finish.timestamp())}
        closes.append(_daily_closes(_get_json(url, params, timeout), column))
    # inner join keeps only days observed in both currencies
    frame = pd.concat(closes, axis=1, join="inner").sort_index()
    frame = frame.loc[[start <= day <= end for day in frame.index]]
    logger.info("Fetched %d daily prices from %s to %s", len(frame), start, end)
    return PriceSeries.from_points(
        PricePoint(date=day, price_primary=float(row.price_primary), price_secondary=float(row.price_secondary))
        for day, row in frame.iterrows()
    )


def history_window(ledger: Ledger, today: dt.date | None = None, padding_days: int = 15) -> Tuple[dt.date, dt.date]:
    """Return the requested history window ``[first purchase - padding, today]``."""

    today = today or dt.date.today()
    first = ledger.first_date or today
    return first - dt.timedelta(days=padding_days), today


__all__ = ["fetch_quote", "fetch_price_history", "history_window"]
