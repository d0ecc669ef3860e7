# algoflow/api/routes/indicators.py
"""
API route for indicator calculation.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from ...indicators.calculate import calculate_indicators
from ...models.market_data import NormalizedCandles


router = APIRouter()


class IndicatorRequest(BaseModel):
    candles: NormalizedCandles
    indicators: List[Dict[str, Any]] = Field(..., min_length=1)


@router.post("/api/indicators/calculate")
def calculate_indicators_endpoint(body: IndicatorRequest, request: Request):
    values = calculate_indicators(body.candles, body.indicators, request.app.state.indicator_registry)
    return {
        "indicators": {
            key: value.to_dict() if hasattr(value, "to_dict") else value
            for key, value in values.items()
        }
    }
