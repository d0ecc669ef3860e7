# algoflow/api/routes/conditions.py
"""
API route for evaluating condition expressions.
"""

from typing import Any, Dict

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ...conditions.evaluator import evaluate_condition


router = APIRouter()


class ConditionRequest(BaseModel):
    expression: str = Field(..., min_length=1)
    indicators: Dict[str, Any] = Field(default_factory=dict)


@router.post("/api/conditions/evaluate")
def evaluate_condition_endpoint(body: ConditionRequest):
    return evaluate_condition(body.indicators, body.expression).to_dict()
