"""Command line interface for btctrack."""

from __future__ import annotations

import math
import time
from pathlib import Path
from typing import Optional, Tuple

import requests
import typer
from rich.console import Console
from rich.table import Table

from btctrack.accounting.ledger import Ledger
from btctrack.config import Config, load_config
from btctrack.data.market_data import fetch_price_history, fetch_quote, history_window
from btctrack.data.prices import PriceSeries, Quote
from btctrack.engine.lots import newest_first
from btctrack.engine.pipeline import PortfolioReport, evaluate
from btctrack.engine.types import Currency, Ratio, is_undefined
from btctrack.errors import TrackerError
from btctrack.reporting.summary import export_report
from btctrack.utils.io import load_ledger, load_price_series, timestamped_dir
from btctrack.utils.logging import get_logger, setup_logging
from btctrack.utils.validation import validate_config

app = typer.Typer(help="Bitcoin DCA portfolio tracker")
console = Console()
logger = get_logger(__name__)


def _load_cfg(config: Optional[Path]) -> Config:
    cfg = load_config(config)
    validate_config(cfg)
    return cfg


def _currencies(cfg: Config) -> Tuple[str, str]:
    return cfg.currencies.primary, cfg.currencies.secondary


def _ledger_path(cfg: Config, ledger: Optional[Path]) -> Path:
    if ledger is not None:
        return ledger
    if cfg.ledger.path:
        return Path(cfg.ledger.path)
    raise typer.BadParameter("Provide --ledger or set ledger.path in the config", param_hint="--ledger")


def _price_series(cfg: Config, ledger: Ledger, prices: Optional[Path]) -> PriceSeries:
    if prices is not None:
        return load_price_series(prices)
    start, end = history_window(ledger, padding_days=cfg.windows.history_padding_days)
    console.print(f"[bold cyan]Fetching daily prices[/bold cyan] {start} -> {end}")
    return fetch_price_history(
        start,
        end,
        currencies=_currencies(cfg),
        asset=cfg.market_data.asset,
        base_url=cfg.market_data.base_url,
        timeout=cfg.market_data.timeout_seconds,
    )


def _live_quote(cfg: Config) -> Quote:
    return fetch_quote(
        currencies=_currencies(cfg),
        asset=cfg.market_data.asset,
        base_url=cfg.market_data.base_url,
        timeout=cfg.market_data.timeout_seconds,
    )


def _resolve_quote(
    cfg: Config,
    prices: PriceSeries,
    live: bool,
    quote_primary: Optional[float],
    quote_secondary: Optional[float],
) -> Quote:
    if live:
        quote = _live_quote(cfg)
        console.print(f"[bold cyan]Fetched live BTC quote[/bold cyan]: {quote.primary:,.2f} / {quote.secondary:,.2f}")
        return quote
    if quote_primary is not None and quote_secondary is not None:
        return Quote(primary=quote_primary, secondary=quote_secondary)
    if len(prices) == 0:
        raise typer.BadParameter("No prices available; pass --quote-primary/--quote-secondary or --live")
    last = prices[-1]
    return Quote(
        primary=quote_primary if quote_primary is not None else last.price_primary,
        secondary=quote_secondary if quote_secondary is not None else last.price_secondary,
    )


def _evaluate(cfg: Config, ledger: Ledger, prices: PriceSeries, quote: Quote, currency: Currency) -> PortfolioReport:
    return evaluate(
        ledger,
        prices,
        quote,
        currency,
        daily_lookback=cfg.windows.daily_lookback,
        weekly_lookback=cfg.windows.weekly_lookback,
    )


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _percent(value: Ratio, scale: float = 1.0) -> str:
    if is_undefined(value):
        return "n/a"
    return f"{value * scale:+.2f}%"


def _windows_table(report: PortfolioReport, code: str) -> Table:
    table = Table(title=f"Performance ({code.upper()})")
    for column in ("Window", "Previous", "Price change", "Price %", "Portfolio change"):
        table.add_column(column, justify="right")
    for name, window in (("1 day", report.windows.daily), ("7 days", report.windows.weekly)):
        table.add_row(
            name,
            _money(window.previous_price),
            _money(window.price_change),
            _percent(window.price_change_percent),
            _money(window.portfolio_change),
        )
    return table


def _lots_table(report: PortfolioReport, code: str) -> Table:
    table = Table(title=f"Transactions ({code.upper()})")
    for column in ("Date", "Purchase price", "BTC", "Cost", "Current value", "P/L", "P/L %"):
        table.add_column(column, justify="right")
    for lot in newest_first(report.lots):
        table.add_row(
            lot.transaction.date.isoformat(),
            _money(lot.unit_price),
            f"{lot.transaction.btc_amount:.8f}",
            _money(lot.acquisition_cost),
            _money(lot.current_value),
            _money(lot.unrealized_pl),
            _percent(lot.unrealized_pl_percent, scale=100.0),
        )
    totals = report.totals
    average = "n/a" if is_undefined(totals.average_cost) else _money(totals.average_cost)
    table.add_row(
        "TOTAL",
        average,
        f"{totals.btc_amount:.8f}",
        _money(totals.acquisition_cost),
        _money(totals.current_value),
        _money(totals.unrealized_pl),
        _percent(totals.unrealized_pl_percent, scale=100.0),
        style="bold",
    )
    return table


def _currency_code(cfg: Config, currency: Currency) -> str:
    return cfg.currencies.primary if currency is Currency.PRIMARY else cfg.currencies.secondary


def _positive(value: Optional[float]) -> Optional[float]:
    if value is not None and not (math.isfinite(value) and value > 0):
        raise typer.BadParameter(f"must be a finite number greater than zero, received {value}")
    return value


def _print_tick(report: PortfolioReport, code: str) -> None:
    totals = report.totals
    console.print(
        f"{code.upper()} {_money(report.current_price)} | "
        f"1d {_percent(report.windows.daily.price_change_percent)} | "
        f"7d {_percent(report.windows.weekly.price_change_percent)} | "
        f"value {_money(totals.current_value)} | "
        f"P/L {_money(totals.unrealized_pl)} ({_percent(totals.unrealized_pl_percent, scale=100.0)})"
    )


@app.callback()
def main(log_level: str = typer.Option("WARNING", help="Logging level")) -> None:
    """Track a Bitcoin accumulation portfolio."""

    setup_logging(log_level)


@app.command()
def summary(
    ledger: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Ledger YAML or CSV"),
    prices: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Daily price CSV (fetched live if omitted)"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Configuration YAML"),
    currency: Currency = typer.Option(Currency.PRIMARY, case_sensitive=False, help="Quote currency to report in"),
    live: bool = typer.Option(False, help="Fetch the current BTC quote"),
    quote_primary: Optional[float] = typer.Option(None, callback=_positive, help="Current price in the primary currency"),
    quote_secondary: Optional[float] = typer.Option(None, callback=_positive, help="Current price in the secondary currency"),
) -> None:
    """Print performance windows and per-lot P/L."""

    cfg = _load_cfg(config)
    try:
        book = load_ledger(_ledger_path(cfg, ledger))
        series = _price_series(cfg, book, prices)
        quote = _resolve_quote(cfg, series, live, quote_primary, quote_secondary)
        report = _evaluate(cfg, book, series, quote, currency)
    except (TrackerError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    code = _currency_code(cfg, currency)
    console.print(f"Current price ({code.upper()}): [bold]{_money(report.current_price)}[/bold]")
    latest = report.latest_snapshot
    if latest is not None:
        console.print(f"Portfolio value on {latest.date}: {_money(latest.market_value)}")
    console.print(_windows_table(report, code))
    console.print(_lots_table(report, code))


@app.command()
def export(
    ledger: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Ledger YAML or CSV"),
    prices: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Daily price CSV (fetched live if omitted)"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Configuration YAML"),
    out: Path = typer.Option(Path("results"), help="Output directory"),
    currency: Currency = typer.Option(Currency.PRIMARY, case_sensitive=False, help="Quote currency to report in"),
    live: bool = typer.Option(False, help="Fetch the current BTC quote"),
) -> None:
    """Write aligned days, snapshots, windows, lots and totals as CSV tables."""

    cfg = _load_cfg(config)
    try:
        book = load_ledger(_ledger_path(cfg, ledger))
        series = _price_series(cfg, book, prices)
        quote = _resolve_quote(cfg, series, live, None, None)
        report = _evaluate(cfg, book, series, quote, currency)
    except (TrackerError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    out_dir = timestamped_dir(out, cfg.meta.name)
    paths = export_report(report, out_dir)
    console.print(f"[bold green]Exported {len(paths)} tables[/bold green] -> {out_dir}")


@app.command()
def watch(
    ledger: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Ledger YAML or CSV"),
    prices: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Daily price CSV (fetched live if omitted)"),
    config: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="Configuration YAML"),
    currency: Currency = typer.Option(Currency.PRIMARY, case_sensitive=False, help="Quote currency to report in"),
    interval: Optional[float] = typer.Option(None, callback=_positive, help="Seconds between refreshes (defaults to config)"),
    iterations: int = typer.Option(0, min=0, help="Stop after this many refreshes (0 runs until interrupted)"),
) -> None:
    """Re-fetch the live quote on a timer and recompute the portfolio each tick."""

    cfg = _load_cfg(config)
    delay = interval if interval is not None else cfg.refresh.interval_seconds
    code = _currency_code(cfg, currency)
    try:
        book = load_ledger(_ledger_path(cfg, ledger))
        series = _price_series(cfg, book, prices)
        tick = 0
        while True:
            try:
                _print_tick(_evaluate(cfg, book, series, _live_quote(cfg), currency), code)
            except TrackerError:
                raise
            except (requests.RequestException, ValueError) as exc:
                # a failed quote fetch skips this tick only
                logger.warning("Refresh %d failed: %s", tick + 1, exc)
            tick += 1
            if iterations and tick >= iterations:
                break
            time.sleep(delay)
    except (TrackerError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    except KeyboardInterrupt:
        console.print("Stopped")


@app.command()
def validate(ledger: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Validate a ledger file without computing anything."""

    try:
        book = load_ledger(ledger)
    except TrackerError as exc:
        console.print(f"[bold red]Invalid ledger:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"Ledger validated successfully ({len(book)} transactions, {book.total_btc():.8f} BTC)")


if __name__ == "__main__":
    app()
