"""
Recursive-descent parser for condition expressions.

Grammar, lowest precedence first::

    or_expr    -> and_expr ("OR" and_expr)*
    and_expr   -> comparison ("AND" comparison)*
    comparison -> primary (OPERATOR primary)?
    primary    -> NUMBER | IDENTIFIER | "(" or_expr ")"
"""

from __future__ import annotations

from typing import List

from .errors import ParserError
from .lexer import Token, TokenType, tokenize
from .nodes import (
    ComparisonNode,
    ComparisonOperator,
    ConditionNode,
    IdentifierNode,
    LogicalNode,
    LogicalOperator,
    NumberNode,
)


MAX_DEPTH = 100


class Parser:
    """Builds a syntax tree from one token list; not reusable across parses."""

    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type is not TokenType.EOF:
            end = tokens[-1].position + len(tokens[-1].value) if tokens else 0
            tokens = list(tokens) + [Token(TokenType.EOF, "", end)]
        self.tokens = tokens
        self.cursor = 0
        self.depth = 0

    def parse(self) -> ConditionNode:
        """
        Parse the full token list.

        Raises:
            ParserError: On unexpected or trailing tokens, or parentheses
                nested deeper than MAX_DEPTH
        """
        node = self._parse_or()

        if not self._is_at_end():
            token = self._current()
            raise ParserError(f"Unexpected token: {token.value}", token.position)

        return node

    def _parse_or(self) -> ConditionNode:
        left = self._parse_and()
        while self._match(TokenType.LOGICAL, "OR"):
            right = self._parse_and()
            left = LogicalNode(LogicalOperator.OR, left, right)
        return left

    def _parse_and(self) -> ConditionNode:
        left = self._parse_comparison()
        while self._match(TokenType.LOGICAL, "AND"):
            right = self._parse_comparison()
            left = LogicalNode(LogicalOperator.AND, left, right)
        return left

    def _parse_comparison(self) -> ConditionNode:
        left = self._parse_primary()
        token = self._current()
        if token.type is TokenType.OPERATOR:
            self._advance()
            right = self._parse_primary()
            return ComparisonNode(ComparisonOperator(token.value), left, right)
        return left

    def _parse_primary(self) -> ConditionNode:
        token = self._current()

        if token.type is TokenType.NUMBER:
            self._advance()
            try:
                return NumberNode(float(token.value))
            except ValueError:
                raise ParserError(f"Invalid number: {token.value}", token.position) from None

        if token.type is TokenType.IDENTIFIER:
            self._advance()
            return IdentifierNode(token.value)

        if token.type is TokenType.LPAREN:
            if self.depth >= MAX_DEPTH:
                raise ParserError("Expression nested too deeply", token.position)
            self._advance()
            self.depth += 1
            node = self._parse_or()
            self.depth -= 1
            if not self._match(TokenType.RPAREN):
                raise ParserError("Expected closing parenthesis", self._current().position)
            return node

        if token.type is TokenType.EOF:
            raise ParserError("Unexpected end of expression", token.position)

        raise ParserError(f"Unexpected token: {token.value}", token.position)

    def _current(self) -> Token:
        return self.tokens[self.cursor]

    def _advance(self) -> Token:
        token = self.tokens[self.cursor]
        if token.type is not TokenType.EOF:
            self.cursor += 1
        return token

    def _match(self, token_type: TokenType, value: str | None = None) -> bool:
        token = self._current()
        if token.type is not token_type:
            return False
        if value is not None and token.value != value:
            return False
        self._advance()
        return True

    def _is_at_end(self) -> bool:
        return self._current().type is TokenType.EOF


def parse(expression: str) -> ConditionNode:
    """Tokenize and parse an expression into a syntax tree."""
    return Parser(tokenize(expression)).parse()
