"""Token types produced by the tokenizer."""
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Operator(Enum):
    """Binary operators, each with its source symbol and precedence."""

    ADD = ("+", 1)
    SUB = ("-", 1)
    MULT = ("*", 2)
    DIV = ("/", 2)

    def __init__(self, symbol: str, precedence: int):
        self.symbol = symbol
        self.precedence = precedence

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        """
        Look up an operator by its source character.

        :param str symbol: One of ``+ - * /``

        :return: Matching operator
        :rtype: Operator
        :raises KeyError: If the symbol is not an operator
        """
        return _BY_SYMBOL[symbol]

    def __str__(self) -> str:
        return self.name.lower()


_BY_SYMBOL = {op.symbol: op for op in Operator}


class Literal(BaseModel):
    """A numeric literal and the half-open [start, end) span it was read from."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, description="Offset of the first character of the literal")
    end: int = Field(..., ge=1, description="Offset one past the last character of the literal")
    value: float = Field(..., description="Parsed numeric value")

    @model_validator(mode="after")
    def span_must_not_be_empty(self) -> "Literal":
        """Ensure that the span covers at least one character."""
        if self.end <= self.start:
            raise ValueError(f"Literal span [{self.start}, {self.end}) is empty")
        return self


Token = Union[Operator, Literal]
