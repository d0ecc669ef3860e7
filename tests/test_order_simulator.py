import pytest

from algoflow.core import create_initial_position, simulate_order
from algoflow.models.orders import OrderSide
from algoflow.models.results import Position


def test_buys_average_into_position():
    trades = []
    first = simulate_order("BUY", 10, 100.0, 1, create_initial_position(), trades)
    second = simulate_order(OrderSide.BUY, 10, 120.0, 2, first.position, trades)

    assert second.position.quantity == 20
    assert second.position.average_price == pytest.approx(110.0)
    assert second.realized_pnl == 0.0
    assert [t.pnl for t in trades] == [None, None]


def test_partial_sell_realizes_pnl_and_keeps_average():
    trades = []
    fill = simulate_order("SELL", 5, 130.0, 3, Position(quantity=20, average_price=110.0), trades)

    assert fill.realized_pnl == pytest.approx(100.0)
    assert fill.position.quantity == 15
    assert fill.position.average_price == pytest.approx(110.0)
    assert trades[0].pnl == pytest.approx(100.0)


def test_sell_is_clamped_to_holding_and_resets_average():
    trades = []
    fill = simulate_order("SELL", 50, 90.0, 4, Position(quantity=15, average_price=110.0), trades)

    assert fill.trade.quantity == 15
    assert fill.realized_pnl == pytest.approx(-300.0)
    assert fill.position.quantity == 0
    assert fill.position.average_price == 0.0


def test_sell_when_flat_realizes_nothing():
    trades = []
    fill = simulate_order("SELL", 5, 90.0, 5, create_initial_position(), trades)

    assert fill.trade.quantity == 0
    assert fill.realized_pnl == 0.0
    assert fill.position.is_flat


def test_input_position_is_not_modified():
    position = Position(quantity=10, average_price=100.0)

    simulate_order("BUY", 10, 200.0, 1, position, [])

    assert position.quantity == 10
    assert position.average_price == 100.0
