import datetime as dt

import pytest

from btctrack.accounting.ledger import Ledger
from btctrack.engine.lots import analyze, newest_first
from btctrack.engine.types import UNDEFINED, Currency


def test_scenario_lots(scenario_ledger) -> None:
    lots, totals = analyze(scenario_ledger, 50_000.0)
    first, second = lots
    assert first.current_value == pytest.approx(5_000.0)
    assert first.unrealized_pl == pytest.approx(1_000.0)
    assert first.unrealized_pl_percent == pytest.approx(0.25)
    assert first.unit_price == pytest.approx(40_000.0)
    assert second.current_value == pytest.approx(2_500.0)
    assert second.unrealized_pl == pytest.approx(0.0)
    assert totals.btc_amount == pytest.approx(0.15)
    assert totals.average_cost == pytest.approx(43_333.33, abs=0.01)
    assert totals.unrealized_pl == pytest.approx(1_000.0)
    assert totals.unrealized_pl_percent == pytest.approx(1_000.0 / 6_500.0)


def test_totals_identity(scenario_ledger) -> None:
    lots, totals = analyze(scenario_ledger, 61_234.5, Currency.SECONDARY)
    assert totals.current_value == sum(lot.current_value for lot in lots)
    assert totals.acquisition_cost == sum(lot.acquisition_cost for lot in lots)


def test_ledger_order_and_newest_first(scenario_ledger) -> None:
    lots, _ = analyze(scenario_ledger, 50_000.0)
    assert [lot.transaction.date for lot in lots] == [dt.date(2024, 1, 1), dt.date(2024, 1, 10)]
    assert [lot.transaction.date for lot in newest_first(lots)] == [dt.date(2024, 1, 10), dt.date(2024, 1, 1)]


def test_zero_cost_lot_is_undefined() -> None:
    ledger = Ledger.from_records(
        [{"date": "2024-01-01", "btc_amount": 0.01, "cost_primary": 0, "cost_secondary": 0}]
    )
    lots, totals = analyze(ledger, 50_000.0)
    assert lots[0].unrealized_pl == pytest.approx(500.0)
    assert lots[0].unrealized_pl_percent is UNDEFINED
    assert totals.unrealized_pl_percent is UNDEFINED
    assert totals.average_cost == 0


def test_empty_ledger() -> None:
    lots, totals = analyze(Ledger(), 50_000.0)
    assert lots == []
    assert totals.btc_amount == 0
    assert totals.current_value == 0
    assert totals.average_cost is UNDEFINED
    assert totals.unrealized_pl_percent is UNDEFINED
