import datetime as dt

import pytest

from btctrack.accounting.ledger import Ledger
from btctrack.data.prices import PricePoint, PriceSeries
from btctrack.engine.align import align
from btctrack.engine.types import Currency
from btctrack.errors import InvalidInputOrder


def _by_date(days):
    return {day.date: day for day in days}


def test_scenario_dca(scenario_ledger, scenario_prices) -> None:
    days = _by_date(align(scenario_ledger, scenario_prices))
    first_buy = days[dt.date(2024, 1, 1)]
    assert first_buy.has_transaction
    assert first_buy.dca_primary == pytest.approx(40_000.0)
    assert first_buy.dca_secondary == pytest.approx(200_000.0)
    last = days[dt.date(2024, 1, 10)]
    assert last.cumulative_btc == pytest.approx(0.15)
    assert last.dca_primary == pytest.approx(43_333.33, abs=0.01)
    assert last.dca(Currency.PRIMARY) == last.dca_primary


def test_dca_is_none_before_first_purchase(scenario_ledger, scenario_prices) -> None:
    days = align(scenario_ledger, scenario_prices)
    before = [day for day in days if day.date < dt.date(2024, 1, 1)]
    assert before
    assert all(day.dca_primary is None and day.dca_secondary is None for day in before)
    assert all(not day.has_transaction and day.transaction is None for day in before)


def test_alignment_completeness(scenario_ledger, scenario_prices) -> None:
    days = align(scenario_ledger, scenario_prices)
    assert [day.date for day in days] == scenario_prices.dates()
    assert sum(day.has_transaction for day in days) == 2


def test_dca_matches_truncated_ledger(scenario_ledger, scenario_prices) -> None:
    for day in align(scenario_ledger, scenario_prices):
        truncated = scenario_ledger.until(day.date)
        if truncated.is_empty:
            assert day.dca_primary is None
            continue
        expected = truncated.total_cost(Currency.PRIMARY) / truncated.total_btc()
        assert day.dca_primary == pytest.approx(expected)
        assert day.cumulative_btc == pytest.approx(truncated.total_btc())


def test_date_regression_raises(scenario_ledger) -> None:
    prices = PriceSeries.from_points(
        [
            PricePoint(dt.date(2024, 1, 2), 1.0, 1.0),
            PricePoint(dt.date(2024, 1, 1), 1.0, 1.0),
        ]
    )
    with pytest.raises(InvalidInputOrder):
        align(scenario_ledger, prices)


def test_duplicate_date_raises(scenario_ledger) -> None:
    prices = [PricePoint(dt.date(2024, 1, 1), 1.0, 1.0), PricePoint(dt.date(2024, 1, 1), 2.0, 2.0)]
    with pytest.raises(InvalidInputOrder):
        align(scenario_ledger, prices)


def test_same_day_purchases_are_all_counted(make_series) -> None:
    ledger = Ledger.from_records(
        [
            {"date": "2024-01-03", "btc_amount": 0.1, "cost_primary": 4000, "cost_secondary": 20000},
            {"date": "2024-01-03", "btc_amount": 0.1, "cost_primary": 5000, "cost_secondary": 25000},
        ]
    )
    prices = make_series(dt.date(2024, 1, 1), dt.date(2024, 1, 5), 40_000.0, 200_000.0)
    day = _by_date(align(ledger, prices))[dt.date(2024, 1, 3)]
    assert len(day.transactions) == 2
    assert day.transaction.btc_amount == pytest.approx(0.2)
    assert day.cumulative_btc == pytest.approx(0.2)
    assert day.dca_primary == pytest.approx(45_000.0)


def test_purchases_before_window_seed_holdings(make_series) -> None:
    ledger = Ledger.from_records(
        [
            {"date": "2023-06-01", "btc_amount": 0.5, "cost_primary": 10000, "cost_secondary": 50000},
            {"date": "2024-01-02", "btc_amount": 0.5, "cost_primary": 20000, "cost_secondary": 100000},
        ]
    )
    days = align(ledger, make_series(dt.date(2024, 1, 1), dt.date(2024, 1, 3), 40_000.0, 200_000.0))
    assert days[0].cumulative_btc == pytest.approx(0.5)
    assert not days[0].has_transaction
    assert days[0].dca_primary == pytest.approx(20_000.0)
    assert days[1].dca_primary == pytest.approx(30_000.0)


def test_gap_day_purchase_enters_next_day(caplog) -> None:
    ledger = Ledger.from_records(
        [{"date": "2024-01-02", "btc_amount": 0.1, "cost_primary": 4000, "cost_secondary": 20000}]
    )
    prices = [PricePoint(dt.date(2024, 1, 1), 40_000.0, 200_000.0), PricePoint(dt.date(2024, 1, 3), 40_000.0, 200_000.0)]
    with caplog.at_level("WARNING", logger="btctrack"):
        days = align(ledger, prices)
    assert "skips days" in caplog.text
    assert days[1].cumulative_btc == pytest.approx(0.1)
    assert not days[1].has_transaction


def test_empty_inputs() -> None:
    assert align(Ledger(), []) == []
    days = align(Ledger(), [PricePoint(dt.date(2024, 1, 1), 1.0, 1.0)])
    assert days[0].dca_primary is None
    assert days[0].cumulative_btc == 0
