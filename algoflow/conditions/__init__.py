"""
Condition expression language: lexer, parser, evaluator and group builder.
"""

from .builder import (
    BuilderOperator,
    ConditionGroup,
    ConditionRow,
    GroupType,
    Operand,
    OperandType,
    generate_expression,
    parse_expression,
)
from .errors import ConditionError, EvaluatorError, LexerError, ParserError
from .evaluator import (
    ConditionResult,
    Evaluator,
    compile_condition,
    evaluate,
    evaluate_ast,
    evaluate_condition,
)
from .lexer import Lexer, Token, TokenType, tokenize
from .nodes import (
    ComparisonNode,
    ComparisonOperator,
    ConditionNode,
    IdentifierNode,
    LogicalNode,
    LogicalOperator,
    NodeKind,
    NumberNode,
    to_expression,
)
from .parser import Parser, parse

__all__ = [
    "BuilderOperator",
    "ConditionGroup",
    "ConditionRow",
    "GroupType",
    "Operand",
    "OperandType",
    "generate_expression",
    "parse_expression",
    "ConditionError",
    "EvaluatorError",
    "LexerError",
    "ParserError",
    "ConditionResult",
    "Evaluator",
    "compile_condition",
    "evaluate",
    "evaluate_ast",
    "evaluate_condition",
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "ComparisonNode",
    "ComparisonOperator",
    "ConditionNode",
    "IdentifierNode",
    "LogicalNode",
    "LogicalOperator",
    "NodeKind",
    "NumberNode",
    "to_expression",
    "Parser",
    "parse",
]
