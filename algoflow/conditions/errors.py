from __future__ import annotations


class ConditionError(Exception):
    """Base exception for condition expression failures."""

    def __init__(self, message: str, code: str, position: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class LexerError(ConditionError):
    """Raised when the expression contains a character the lexer cannot read."""

    def __init__(self, message: str, position: int):
        super().__init__(message, "LEXER_ERROR", position)


class ParserError(ConditionError):
    """Raised when the token stream does not match the grammar."""

    def __init__(self, message: str, position: int):
        super().__init__(message, "PARSER_ERROR", position)


class EvaluatorError(ConditionError):
    """Raised when an identifier cannot be resolved to a usable value."""

    def __init__(self, message: str):
        super().__init__(message, "EVALUATOR_ERROR")
