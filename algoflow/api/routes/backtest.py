# algoflow/api/routes/backtest.py
"""
API route for running backtests.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Request, Response

from ...core.backtest_engine import BacktestEngine
from ...models.market_data import NormalizedCandles
from ...models.results import BacktestRequest


logger = logging.getLogger(__name__)
router = APIRouter()


class BacktestRunRequest(BacktestRequest):
    """Backtest request, optionally carrying its own candles."""
    candles: Optional[NormalizedCandles] = None


@router.post("/api/backtest/run")
def run_backtest_endpoint(body: BacktestRunRequest, request: Request):
    """
    Run a backtest synchronously.

    Candles in the body are replayed as-is; otherwise they are loaded
    from the requested broker.
    """
    config = request.app.state.config
    engine = BacktestEngine(
        router=request.app.state.broker_router,
        registry=request.app.state.indicator_registry,
        default_lookback=config.backtest.default_lookback,
        show_progress=config.backtest.show_progress,
    )

    logger.info(f"API backtest for {body.symbol} ({body.interval}) via {body.broker}")
    result = engine.run(body, candles=body.candles)

    # Profit factor may be infinite; pydantic renders it as a string.
    return Response(
        content=result.model_dump_json(by_alias=True, exclude_none=True),
        media_type="application/json",
    )
