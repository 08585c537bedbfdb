"""Split raw expression text into operator and literal tokens."""
from typing import List, Optional

from arithmetic_calculator.common.errors import UnexpectedCharacterError
from arithmetic_calculator.common.tokens import Literal, Operator, Token

DIGITS = "0123456789"
WHITESPACE = " \t\n\r\x0b\x0c"


class Tokenizer:
    """
    Character-by-character scanner for arithmetic expressions.

    The scanner keeps at most one open literal span ``[tok_start, tok_end)``.
    Digits and ``.`` open or extend the span; operators and whitespace close
    it. A ``-`` opens a negative literal when nothing is open and the previous
    token (if any) is an operator, otherwise it is a subtraction.

    Examples:
        - ``"1+-1"`` -> ``1``, ``+``, ``-1``
        - ``".5 * 2"`` -> ``0.5``, ``*``, ``2``
    """

    def __init__(self, text: str):
        self.text = text
        self.tokens: List[Token] = []
        self.tok_start: Optional[int] = None
        self.tok_end: Optional[int] = None
        self.seen_decimal = False

    def run(self) -> List[Token]:
        """
        Scan the whole text and return the emitted tokens.

        :return: Tokens in source order
        :rtype: List[Token]
        :raises UnexpectedCharacterError: On an unclassifiable character or malformed number
        """
        for i, char in enumerate(self.text):
            if char in "+*/":
                self._close_literal()
                self.tokens.append(Operator.from_symbol(char))

            elif char == "-":
                if self.tok_start is None and self._expects_operand():
                    # Sign of the next literal
                    self._open_literal(i)
                else:
                    self._close_literal()
                    self.tokens.append(Operator.SUB)

            elif char in WHITESPACE:
                self._close_literal()

            elif char in DIGITS:
                self._extend_literal(i)

            elif char == ".":
                if self.seen_decimal:
                    raise UnexpectedCharacterError(self.text, i, "second decimal point in literal")
                self.seen_decimal = True
                self._extend_literal(i)

            else:
                raise UnexpectedCharacterError(self.text, i)

        self._close_literal()
        return self.tokens

    def _expects_operand(self) -> bool:
        return not self.tokens or isinstance(self.tokens[-1], Operator)

    def _open_literal(self, i: int) -> None:
        self.tok_start = i
        self.tok_end = i + 1

    def _extend_literal(self, i: int) -> None:
        if self.tok_start is None:
            self._open_literal(i)
        else:
            self.tok_end += 1

    def _close_literal(self) -> None:
        """Emit the open span, if any, as a Literal token and reset the span state."""
        if self.tok_start is None:
            return

        span = self.text[self.tok_start:self.tok_end]
        try:
            value = float(span)
        except ValueError:
            raise UnexpectedCharacterError(
                self.text, self.tok_start, f"malformed number {span!r}"
            ) from None

        self.tokens.append(Literal(start=self.tok_start, end=self.tok_end, value=value))
        self.tok_start = None
        self.tok_end = None
        self.seen_decimal = False


def tokenize(text: str) -> List[Token]:
    """
    Convert an expression into a list of tokens.

    :param str text: Arithmetic expression, e.g. ``"1 + 2 * -3.5"``

    :return: Operators and literals in source order
    :rtype: List[Token]
    :raises UnexpectedCharacterError: If the text contains an invalid character or number
    """
    return Tokenizer(text).run()
