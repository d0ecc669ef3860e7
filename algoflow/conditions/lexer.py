"""
Tokenizer for condition expressions such as ``RSI_14 < 30 AND close > SMA_20``.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import LexerError


class TokenType(str, Enum):
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    LOGICAL = "LOGICAL"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    position: int


TWO_CHAR_OPERATORS = (">=", "<=", "==", "!=")
ONE_CHAR_OPERATORS = (">", "<")
LOGICAL_KEYWORDS = ("AND", "OR")


def _is_digit(char: str) -> bool:
    return len(char) == 1 and char in string.digits


def _is_identifier_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char == "_")


def _is_identifier_part(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char in "_.")


class Lexer:
    """Single-pass scanner over one expression string."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.source):
            return self.source[index]
        return ""

    def _read_while(self, predicate) -> str:
        start = self.pos
        while self.pos < len(self.source) and predicate(self.source[self.pos]):
            self.pos += 1
        return self.source[start:self.pos]

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []

        while self.pos < len(self.source):
            char = self._peek()

            if char.isspace():
                self.pos += 1
                continue

            start = self.pos

            # signed or unsigned number; '-' only counts when a digit follows
            if _is_digit(char) or (char == "-" and _is_digit(self._peek(1))):
                self.pos += 1
                text = char + self._read_while(lambda c: _is_digit(c) or c == ".")
                tokens.append(Token(TokenType.NUMBER, text, start))
                continue

            if _is_identifier_start(char):
                text = self._read_while(_is_identifier_part)
                if text in LOGICAL_KEYWORDS:
                    tokens.append(Token(TokenType.LOGICAL, text, start))
                else:
                    tokens.append(Token(TokenType.IDENTIFIER, text, start))
                continue

            pair = self.source[self.pos:self.pos + 2]
            if pair in TWO_CHAR_OPERATORS:
                self.pos += 2
                tokens.append(Token(TokenType.OPERATOR, pair, start))
                continue

            if char in ONE_CHAR_OPERATORS:
                self.pos += 1
                tokens.append(Token(TokenType.OPERATOR, char, start))
                continue

            if char == "(":
                self.pos += 1
                tokens.append(Token(TokenType.LPAREN, char, start))
                continue

            if char == ")":
                self.pos += 1
                tokens.append(Token(TokenType.RPAREN, char, start))
                continue

            raise LexerError(f"Unexpected character: {char}", start)

        tokens.append(Token(TokenType.EOF, "", self.pos))
        return tokens


def tokenize(expression: str) -> List[Token]:
    """Split an expression into tokens, ending with an EOF token."""
    return Lexer(expression).tokenize()
