"""Pydantic models for arithmetic operation requests and results."""
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from arithmetic_calculator.common.tree import format_number


class OperationRequest(BaseModel):
    """Represents a single arithmetic expression waiting to be evaluated."""

    expression: str = Field(..., description="Arithmetic expression as a string")
    line_number: int = Field(default=1, ge=1, description="Line number in the input")


class OperationResult(BaseModel):
    """Represents the outcome of an evaluated arithmetic operation."""

    expression: str = Field(..., description="Original arithmetic expression")
    result: Optional[float] = Field(default=None, description="Evaluated numeric result of the expression")
    error: Optional[str] = Field(default=None, description="Error message if the evaluation failed")

    @model_validator(mode="after")
    def result_xor_error(self) -> "OperationResult":
        """Ensure exactly one of result and error is set."""
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of result and error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_line(self) -> str:
        """
        Render the result the way it is written to results files.

        :return: ``"<expr> = <result>"`` or ``"<expr> -> ERROR: <message>"``
        :rtype: str
        """
        if self.ok:
            return f"{self.expression} = {format_number(self.result)}"
        return f"{self.expression} -> ERROR: {self.error}"
