"""Parse and evaluate arithmetic expressions safely."""
from typing import List, Sequence

from arithmetic_calculator.common import evaluator, tokenizer, tree
from arithmetic_calculator.common.logger import logger
from arithmetic_calculator.common.tokens import Token
from arithmetic_calculator.common.tree import Node


class ExpressionParser:
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Safe, deterministic computation

    Algorithm:
        1. Tokenize character by character, absorbing signs and decimal points into literals
        2. Build a binary tree by collapsing the highest-precedence operator first
        3. Evaluate the tree recursively

    Examples:
        - Expression: 1 + 2 * 4 + 1
        - Tree: add(add(1, mult(2, 4)), 1)
        - Result: 10
    """

    @staticmethod
    def tokenize(expr: str) -> List[Token]:
        """
        Split an arithmetic expression into tokens.

        Whitespace is optional (e.g., "3+4*2" and "3 + 4 * 2" are equivalent).

        :param str expr: Arithmetic expression as a string

        :return: List of tokens
        :rtype: List[Token]
        :raises UnexpectedCharacterError: If a character or number is invalid
        """
        return tokenizer.tokenize(expr)

    @staticmethod
    def build(tokens: Sequence[Token]) -> Node:
        """
        Build the expression tree for a token sequence.

        :param Sequence[Token] tokens: Tokens returned by tokenize()

        :return: Root node of the tree
        :rtype: Node
        :raises ExpressionSyntaxError: If the tokens do not form a valid expression
        """
        return tree.build(tokens)

    @staticmethod
    def compute(root: Node) -> float:
        """
        Compute the value of an expression tree.

        :param Node root: Root node returned by build()

        :return: Computed result
        :rtype: float
        :raises DivisionByZeroError: If a division by zero is attempted
        """
        return evaluator.evaluate(root)

    @staticmethod
    def evaluate(expr: str) -> float:
        """
        Evaluate an arithmetic expression safely.

        :param str expr: Arithmetic expression string

        :return: Computed result as float
        :rtype: float
        :raises CalculatorError: If the expression is invalid or cannot be computed
        """
        tokens: List[Token] = ExpressionParser.tokenize(expr)
        logger.debug("🔤 %d tokens for %r", len(tokens), expr)

        root: Node = ExpressionParser.build(tokens)
        logger.debug("🌳 Tree for %r: %s", expr, root)

        return ExpressionParser.compute(root)
