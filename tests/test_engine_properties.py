import datetime as dt

import pytest

from btctrack.data.prices import Quote
from btctrack.engine.aggregate import accumulate
from btctrack.engine.align import align
from btctrack.engine.lots import analyze
from btctrack.engine.performance import compute_windows
from btctrack.engine.pipeline import evaluate
from btctrack.engine.types import Currency


def test_components_are_idempotent(scenario_ledger, scenario_prices) -> None:
    days = align(scenario_ledger, scenario_prices)
    assert align(scenario_ledger, scenario_prices) == days
    assert accumulate(days, scenario_ledger) == accumulate(days, scenario_ledger)
    assert compute_windows(days, 50_000.0, 0.15) == compute_windows(days, 50_000.0, 0.15)
    assert analyze(scenario_ledger, 50_000.0) == analyze(scenario_ledger, 50_000.0)


def test_evaluate_matches_components(scenario_ledger, scenario_prices) -> None:
    quote = Quote(primary=50_000.0, secondary=250_000.0)
    report = evaluate(scenario_ledger, scenario_prices, quote)
    assert report == evaluate(scenario_ledger, scenario_prices, quote)
    assert report.current_price == 50_000.0
    assert len(report.days) == len(scenario_prices)
    assert report.latest_snapshot.market_value == pytest.approx(7_500.0)
    assert report.windows.daily.previous_price == pytest.approx(40_000.0)
    assert report.windows.daily.portfolio_change == pytest.approx(10_000.0 * 0.15)
    assert report.lots[1].unrealized_pl == pytest.approx(0.0)
    assert report.totals.acquisition_cost == pytest.approx(6_500.0)


def test_evaluate_in_secondary_currency(scenario_ledger, scenario_prices) -> None:
    report = evaluate(scenario_ledger, scenario_prices, Quote(50_000.0, 250_000.0), Currency.SECONDARY)
    assert report.currency is Currency.SECONDARY
    assert report.current_price == 250_000.0
    assert report.totals.acquisition_cost == pytest.approx(32_500.0)
    assert report.snapshots[-1].date == dt.date(2024, 1, 10)


def test_inputs_are_not_mutated(scenario_ledger, scenario_prices) -> None:
    before = (scenario_ledger.transactions, scenario_prices.points)
    evaluate(scenario_ledger, scenario_prices, Quote(50_000.0, 250_000.0))
    assert (scenario_ledger.transactions, scenario_prices.points) == before
