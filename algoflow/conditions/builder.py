"""
Structured condition groups and their conversion to expression text.

Groups come from form-style editors: rows of ``left OPERATOR right``
joined by AND/OR, with nested groups. ``parse_expression`` only recovers
a single simple comparison; anything richer returns None.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class OperandType(str, Enum):
    INDICATOR = "indicator"
    NUMBER = "number"
    PRICE = "price"


class BuilderOperator(str, Enum):
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NEQ = "!="
    CROSS_ABOVE = "CROSS_ABOVE"
    CROSS_BELOW = "CROSS_BELOW"


class GroupType(str, Enum):
    AND = "AND"
    OR = "OR"


class Operand(BaseModel):
    type: OperandType = Field(..., description="indicator, number or price")
    value: Union[float, str] = Field(..., description="Indicator key, price field or literal")

    def to_text(self) -> str:
        if self.type is OperandType.NUMBER and isinstance(self.value, float):
            return str(int(self.value)) if self.value.is_integer() else str(self.value)
        return str(self.value)


class ConditionRow(BaseModel):
    id: str
    left: Operand
    operator: BuilderOperator = BuilderOperator.GT
    right: Operand


class ConditionGroup(BaseModel):
    id: str
    type: GroupType = GroupType.AND
    children: List[Union["ConditionGroup", ConditionRow]] = Field(default_factory=list)


ConditionGroup.model_rebuild()


def _row_to_expression(row: ConditionRow) -> str:
    left = row.left.to_text()
    right = row.right.to_text()

    # CROSS() is emitted for editors but has no evaluator support
    if row.operator is BuilderOperator.CROSS_ABOVE:
        return f"CROSS({left}, {right}) == 1"
    if row.operator is BuilderOperator.CROSS_BELOW:
        return f"CROSS({left}, {right}) == -1"
    return f"{left} {row.operator.value} {right}"


def generate_expression(group: ConditionGroup) -> str:
    """Render a condition group as expression text."""
    if not group.children:
        return "true"

    parts = []
    for child in group.children:
        if isinstance(child, ConditionGroup):
            parts.append(f"({generate_expression(child)})")
        else:
            parts.append(_row_to_expression(child))

    return f" {group.type.value} ".join(parts)


_SIMPLE_COMPARISON = re.compile(
    r"^(\w+(?:\.\w+)?)\s*(>=|<=|==|!=|>|<)\s*(\w+(?:\.\w+)?|\d+(?:\.\d+)?)$"
)
_NUMBER = re.compile(r"^\d+(?:\.\d+)?$")
_PRICE_FIELDS = ("open", "high", "low", "close", "volume")


def _operand_from_text(text: str) -> Operand:
    if _NUMBER.match(text):
        return Operand(type=OperandType.NUMBER, value=float(text))
    if text in _PRICE_FIELDS:
        return Operand(type=OperandType.PRICE, value=text)
    return Operand(type=OperandType.INDICATOR, value=text)


def parse_expression(expression: str) -> Optional[ConditionGroup]:
    """
    Recover a condition group from a single simple comparison.

    Returns:
        A root AND group holding one row, or None for any other shape
    """
    if not expression or not expression.strip():
        return None

    match = _SIMPLE_COMPARISON.match(expression.strip())
    if not match:
        return None

    left, operator, right = match.groups()
    row = ConditionRow(
        id="row_1",
        left=_operand_from_text(left),
        operator=BuilderOperator(operator),
        right=_operand_from_text(right),
    )
    return ConditionGroup(id="root", type=GroupType.AND, children=[row])
