# algoflow/core/order_simulator.py
"""
Long-only fill simulator used by the backtest replay.
"""

import logging
from dataclasses import dataclass
from typing import List, Union

from ..models.orders import OrderSide
from ..models.results import BacktestTrade, Position


logger = logging.getLogger(__name__)


@dataclass
class SimulatedOrder:
    """Outcome of one simulated fill."""
    position: Position
    trade: BacktestTrade
    realized_pnl: float


def create_initial_position() -> Position:
    return Position(quantity=0.0, average_price=0.0)


def simulate_order(
    type: Union[OrderSide, str],
    quantity: float,
    price: float,
    timestamp: int,
    position: Position,
    trades: List[BacktestTrade],
) -> SimulatedOrder:
    """
    Fill an order at ``price`` and append the trade to ``trades``.

    BUY averages the new lot into the position cost. SELL is clamped to
    the held quantity, realizes ``(price - average_price) * qty`` and
    resets the average price once the position is flat.

    Args:
        type: BUY or SELL
        quantity: Requested quantity
        price: Fill price
        timestamp: Fill time in epoch milliseconds
        position: Position before the fill (not modified)
        trades: Trade log, appended in place

    Returns:
        SimulatedOrder with the new position, the trade and realized P&L
    """
    side = OrderSide(type)
    realized_pnl = 0.0

    if side is OrderSide.BUY:
        total_qty = position.quantity + quantity
        total_cost = position.quantity * position.average_price + quantity * price
        new_position = Position(
            quantity=total_qty,
            average_price=total_cost / total_qty if total_qty > 0 else 0.0,
        )
        trade = BacktestTrade(type=side, quantity=quantity, price=price, timestamp=timestamp)
    else:
        sell_qty = min(quantity, position.quantity)
        if sell_qty > 0 and position.average_price > 0:
            realized_pnl = (price - position.average_price) * sell_qty

        remaining = position.quantity - sell_qty
        new_position = Position(
            quantity=remaining,
            average_price=position.average_price if remaining > 0 else 0.0,
        )
        trade = BacktestTrade(
            type=side,
            quantity=sell_qty,
            price=price,
            timestamp=timestamp,
            pnl=realized_pnl,
        )

    trades.append(trade)
    logger.debug(f"Simulated {side.value} {trade.quantity} @ {price}: position {new_position.quantity}")

    return SimulatedOrder(position=new_position, trade=trade, realized_pnl=realized_pnl)
