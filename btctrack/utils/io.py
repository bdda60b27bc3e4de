"""Input/output helpers for btctrack."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List

import pandas as pd
import yaml

from btctrack.accounting.ledger import Ledger
from btctrack.data.prices import PricePoint, PriceSeries
from btctrack.errors import InvalidLedgerEntry
from btctrack.utils.logging import get_logger
from btctrack.utils.validation import assert_positive

PRICE_COLUMNS = ("date", "price_primary", "price_secondary")
LEDGER_NUMERIC_COLUMNS = ("btc_amount", "cost_primary", "cost_secondary")

logger = get_logger(__name__)


def ensure_directory(path: Path) -> None:
    """Create directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)


def timestamped_dir(base: Path, prefix: str) -> Path:
    """Return a directory path suffixed with the current timestamp."""

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = base / prefix / stamp
    ensure_directory(path)
    return path


def _ledger_records(path: Path) -> List[Any]:
    if path.suffix.lower() == ".csv":
        frame = pd.read_csv(path, dtype={"date": str})
        for column in LEDGER_NUMERIC_COLUMNS:
            if column in frame.columns:
                # unparseable numbers become NaN and fail record validation
                frame[column] = pd.to_numeric(frame[column], errors="coerce").astype(float)
        return frame.to_dict(orient="records")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or []
    if isinstance(data, dict):
        data = data.get("transactions", [])
    if not isinstance(data, list):
        raise InvalidLedgerEntry(f"Ledger file {path} must contain a list of transactions")
    return data


def load_ledger(path: str | Path) -> Ledger:
    """Load and validate a YAML or CSV ledger file."""

    path = Path(path)
    ledger = Ledger.from_records(_ledger_records(path))
    logger.info("Loaded %d transaction(s) from %s", len(ledger), path)
    return ledger


def load_price_series(path: str | Path) -> PriceSeries:
    """Load a daily price CSV with ``date, price_primary, price_secondary`` columns.

    Rows keep file order; ordering is enforced later by the aligner.
    """

    df = pd.read_csv(path)
    missing = [column for column in PRICE_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Price file {path} is missing columns: {', '.join(missing)}")
    try:
        dates = pd.to_datetime(df["date"], format="ISO8601").dt.date
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Price file {path} has an unparseable date: {exc}") from exc
    points = []
    for day, primary, secondary in zip(dates, df["price_primary"], df["price_secondary"]):
        assert_positive(float(primary), f"price_primary on {day}")
        assert_positive(float(secondary), f"price_secondary on {day}")
        points.append(PricePoint(date=day, price_primary=float(primary), price_secondary=float(secondary)))
    return PriceSeries.from_points(points)


def save_price_series(prices: PriceSeries, path: str | Path) -> Path:
    """Persist a price series in the format read by :func:`load_price_series`."""

    path = Path(path)
    ensure_directory(path.parent)
    frame = pd.DataFrame(
        [(point.date.isoformat(), point.price_primary, point.price_secondary) for point in prices],
        columns=list(PRICE_COLUMNS),
    )
    frame.to_csv(path, index=False)
    return path


def save_table(df: pd.DataFrame, out_dir: Path, name: str) -> Path:
    """Persist a dataframe as CSV."""

    ensure_directory(out_dir)
    path = out_dir / f"{name}.csv"
    df.to_csv(path, index=False)
    return path


__all__ = [
    "ensure_directory",
    "timestamped_dir",
    "load_ledger",
    "load_price_series",
    "save_price_series",
    "save_table",
]
