"""
Syntax tree for condition expressions.

Every node carries a ``kind`` tag so callers can dispatch without
inspecting classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class NodeKind(str, Enum):
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"
    COMPARISON = "COMPARISON_EXPR"
    LOGICAL = "BINARY_EXPR"


class ComparisonOperator(str, Enum):
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NEQ = "!="


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class NumberNode:
    value: float
    kind: NodeKind = field(default=NodeKind.NUMBER, init=False)


@dataclass(frozen=True)
class IdentifierNode:
    name: str
    kind: NodeKind = field(default=NodeKind.IDENTIFIER, init=False)


@dataclass(frozen=True)
class ComparisonNode:
    operator: ComparisonOperator
    left: "ConditionNode"
    right: "ConditionNode"
    kind: NodeKind = field(default=NodeKind.COMPARISON, init=False)


@dataclass(frozen=True)
class LogicalNode:
    operator: LogicalOperator
    left: "ConditionNode"
    right: "ConditionNode"
    kind: NodeKind = field(default=NodeKind.LOGICAL, init=False)


ConditionNode = Union[NumberNode, IdentifierNode, ComparisonNode, LogicalNode]


def to_expression(node: ConditionNode) -> str:
    """Render a tree back to expression text, parenthesising nested operands."""
    if node.kind is NodeKind.NUMBER:
        value = node.value
        return str(int(value)) if float(value).is_integer() else str(value)
    if node.kind is NodeKind.IDENTIFIER:
        return node.name
    if node.kind is NodeKind.COMPARISON:
        wrap = (NodeKind.COMPARISON, NodeKind.LOGICAL)
    else:
        wrap = (NodeKind.LOGICAL,)
    left = _wrapped(node.left, wrap)
    right = _wrapped(node.right, wrap)
    return f"{left} {node.operator.value} {right}"


def _wrapped(node: ConditionNode, wrap) -> str:
    text = to_expression(node)
    if node.kind in wrap:
        return f"({text})"
    return text
