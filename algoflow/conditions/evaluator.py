"""
Tree-walking evaluator for condition expressions.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping

from .errors import EvaluatorError
from .nodes import ComparisonNode, ComparisonOperator, ConditionNode, LogicalOperator, NodeKind
from .parser import parse


logger = logging.getLogger(__name__)

IndicatorRecord = Mapping[str, Any]

_COMPARATORS = {
    ComparisonOperator.GT: lambda a, b: a > b,
    ComparisonOperator.LT: lambda a, b: a < b,
    ComparisonOperator.GTE: lambda a, b: a >= b,
    ComparisonOperator.LTE: lambda a, b: a <= b,
    ComparisonOperator.EQ: lambda a, b: a == b,
    ComparisonOperator.NEQ: lambda a, b: a != b,
}


@dataclass(frozen=True)
class ConditionResult:
    """Outcome of evaluating one expression."""
    condition_met: bool
    expression: str

    def to_dict(self) -> Dict[str, Any]:
        return {'conditionMet': self.condition_met, 'expression': self.expression}


@lru_cache(maxsize=256)
def compile_condition(expression: str) -> ConditionNode:
    """Parse an expression once; trees are immutable so they are cached."""
    return parse(expression)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_mapping(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return None


def _lookup(indicators: IndicatorRecord, key: str) -> Any:
    if key in indicators:
        return indicators[key]
    folded = key.casefold()
    for name, value in indicators.items():
        if name.casefold() == folded:
            return value
    raise EvaluatorError(f"Unknown indicator: {key}")


class Evaluator:
    """Evaluates syntax trees against one snapshot of indicator values."""

    def __init__(self, indicators: IndicatorRecord):
        self.indicators = indicators

    def resolve(self, name: str) -> float:
        """
        Resolve an identifier to a number.

        ``MACD.line`` style names address members of composite values.

        Raises:
            EvaluatorError: If the name is unknown or has the wrong shape
        """
        key, _, member = name.partition(".")

        if not member:
            value = _lookup(self.indicators, name)
            if value is None:
                raise EvaluatorError(f"Indicator {name} has no value yet")
            if _is_scalar(value):
                return float(value)
            if _as_mapping(value) is not None:
                raise EvaluatorError(
                    f"Indicator {name} is an object, use dot notation (e.g., {name}.line)"
                )
            raise EvaluatorError(f"Indicator {name} has unsupported value type {type(value).__name__}")

        value = _lookup(self.indicators, key)
        if _is_scalar(value):
            raise EvaluatorError(f"Indicator {key} is a number, not an object")

        members = _as_mapping(value)
        if members is None or member not in members:
            raise EvaluatorError(f"Unknown property: {member} on {key}")

        nested = members[member]
        if not _is_scalar(nested):
            raise EvaluatorError(f"Property {member} on {key} has no value yet")
        return float(nested)

    def value_of(self, node: ConditionNode) -> float:
        if node.kind is NodeKind.NUMBER:
            return node.value
        if node.kind is NodeKind.IDENTIFIER:
            return self.resolve(node.name)
        # parenthesised sub-expressions used as operands compare as 1/0
        return 1.0 if self.truth_of(node) else 0.0

    def truth_of(self, node: ConditionNode) -> bool:
        if node.kind is NodeKind.LOGICAL:
            left = self.truth_of(node.left)
            right = self.truth_of(node.right)
            if node.operator is LogicalOperator.AND:
                return left and right
            return left or right

        if node.kind is NodeKind.COMPARISON:
            return self._compare(node)

        return self.value_of(node) != 0

    def _compare(self, node: ComparisonNode) -> bool:
        left = self.value_of(node.left)
        right = self.value_of(node.right)
        return bool(_COMPARATORS[node.operator](left, right))


def evaluate_ast(node: ConditionNode, indicators: IndicatorRecord) -> bool:
    """Evaluate an already parsed tree."""
    return Evaluator(indicators).truth_of(node)


def evaluate(expression: str, indicators: IndicatorRecord) -> bool:
    """
    Evaluate a condition expression against indicator values.

    Args:
        expression: Expression text, e.g. ``"RSI_14 < 30 AND close > SMA_20"``
        indicators: Mapping of indicator key to a number or composite value

    Returns:
        True when the condition holds

    Raises:
        LexerError: On unreadable characters
        ParserError: On malformed expressions
        EvaluatorError: On unknown or mis-shaped identifiers
    """
    return evaluate_ast(compile_condition(expression), indicators)


def evaluate_condition(indicators: IndicatorRecord, expression: str) -> ConditionResult:
    """Evaluate and wrap the outcome for workflow and backtest logs."""
    met = evaluate(expression, indicators)
    logger.debug(f"Condition '{expression}' evaluated to {met}")
    return ConditionResult(condition_met=met, expression=expression)
