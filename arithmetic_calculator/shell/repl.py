"""Interactive read-eval-print loop."""
import sys
from typing import Optional, TextIO

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_calculator.common.errors import (
    CalculatorError,
    DivisionByZeroError,
    ExpressionSyntaxError,
    UnexpectedCharacterError,
)
from arithmetic_calculator.common.logger import logger
from arithmetic_calculator.common.parser import ExpressionParser
from arithmetic_calculator.common.tree import format_number


class ReplConfig(BaseModel):
    """Settings of the interactive shell."""

    # Read-only once the shell is running
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(default=">> ", description="Prompt printed before each line is read")
    quit_prefix: str = Field(default="q", min_length=1, description="Lines starting with this prefix end the session")
    max_line_length: int = Field(default=256, ge=1, description="Longest accepted input line, newline excluded")


def failed_stage(exc: CalculatorError) -> str:
    """
    Name the pipeline stage an error came from.

    :param CalculatorError exc: Error raised by the pipeline

    :return: Stage description used in error messages
    :rtype: str
    """
    if isinstance(exc, UnexpectedCharacterError):
        return "tokenize input"
    if isinstance(exc, ExpressionSyntaxError):
        return "parse syntax"
    if isinstance(exc, DivisionByZeroError):
        return "compute result"
    return "process input"


class Repl:
    """
    Interactive shell evaluating one expression per line.

    The session ends on end-of-input, on an empty line, or on a line starting
    with the quit prefix. Errors only abort the current line.
    """

    def __init__(
        self,
        config: Optional[ReplConfig] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.config = config or ReplConfig()
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def evaluate_line(self, line: str) -> str:
        """
        Evaluate one input line and return the text to print for it.

        :param str line: Expression without its trailing newline

        :return: Formatted result or error message
        :rtype: str
        """
        if len(line) > self.config.max_line_length:
            logger.info(f"📏❌ Line of {len(line)} characters rejected")
            return f"Failed to process input: line longer than {self.config.max_line_length} characters"

        try:
            result = ExpressionParser.evaluate(line)
        except CalculatorError as exc:
            logger.info(f"❌ Could not evaluate {line!r}: {exc}")
            message = f"Failed to {failed_stage(exc)}: {exc}"
            if isinstance(exc, UnexpectedCharacterError):
                message = f"{message}\n{exc.diagnostic()}"
            return message

        return format_number(result)

    def run(self) -> int:
        """
        Run the loop until the session ends.

        :return: Process exit code
        :rtype: int
        """
        logger.info("🧮 Calculator shell started")
        self._write(self.config.prompt)

        while True:
            line = self.stdin.readline()
            # readline() returns "" only at end of input
            if not line:
                break

            line = line.rstrip("\r\n")
            if not line or line.startswith(self.config.quit_prefix):
                break

            self._write(f"{self.evaluate_line(line)}\n{self.config.prompt}")

        self._write("\nExiting...\n")
        logger.info("🧮 Calculator shell stopped")
        return 0
