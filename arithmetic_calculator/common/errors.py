"""Exceptions raised by the arithmetic pipeline."""
from typing import Optional


class CalculatorError(Exception):
    """Base class for every error raised while evaluating an expression."""


class UnexpectedCharacterError(CalculatorError, ValueError):
    """
    Raised by the tokenizer when a character cannot be classified.

    Also covers numeric spans that fail to parse (a lone ``-`` or ``.``)
    and a second decimal point inside one literal.

    :param str text: Expression being tokenized
    :param int position: Offset of the rejected character or span
    :param str reason: Optional human-readable explanation
    """

    def __init__(self, text: str, position: int, reason: Optional[str] = None):
        self.text = text
        self.position = position
        if reason is None:
            reason = f"unexpected character {text[position]!r}" if position < len(text) else "unexpected end of input"
        self.reason = reason
        super().__init__(f"{reason} at position {position}")

    def diagnostic(self) -> str:
        """Return the expression with a caret under the offending position."""
        return f"{self.text}\n{' ' * self.position}^"


class ExpressionSyntaxError(CalculatorError, ValueError):
    """Raised when a token sequence cannot form a binary expression tree."""


class OpeningWithOperatorError(ExpressionSyntaxError):
    """Raised when an expression starts with an operator."""


class EndingWithOperatorError(ExpressionSyntaxError):
    """Raised when an expression ends with an operator."""


class EmptyExpressionError(ExpressionSyntaxError):
    """Raised when there is nothing to build a tree from."""


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    """Raised when the right operand of a division evaluates to exactly 0."""


class OperationsFileError(CalculatorError, ValueError):
    """Raised when a file of expressions cannot be read (unsupported, corrupt or without a .txt member)."""
