"""Reduce an expression tree to a number."""
from collections.abc import Callable as ABCCallable
import operator
from typing import Callable, Dict, List, Tuple

from arithmetic_calculator.common.errors import DivisionByZeroError
from arithmetic_calculator.common.tokens import Operator
from arithmetic_calculator.common.tree import BinaryNode, Leaf, Node


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]

OPERATIONS: Dict[Operator, OperatorFn] = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MULT: operator.mul,
    Operator.DIV: operator.truediv,
}


def evaluate(node: Node) -> float:
    """
    Evaluate an expression tree.

    The tree is walked in post-order with an explicit stack: the left subtree
    is evaluated before the right one, and the first error raised on either
    side propagates immediately.

    :param Node node: Root of the (sub)tree

    :return: Numeric result
    :rtype: float
    :raises DivisionByZeroError: If a division has a right operand equal to 0
    """
    values: List[float] = []
    # (node, children already scheduled)
    stack: List[Tuple[Node, bool]] = [(node, False)]

    while stack:
        current, expanded = stack.pop()
        if isinstance(current, Leaf):
            values.append(current.literal.value)
        elif not expanded:
            stack.append((current, True))
            stack.append((current.right, False))
            stack.append((current.left, False))
        else:
            right: float = values.pop()
            left: float = values.pop()
            if current.operator is Operator.DIV and right == 0:
                raise DivisionByZeroError(
                    f"Division by zero: {format_operand(current.left)} / {format_operand(current.right)}"
                )
            values.append(OPERATIONS[current.operator](left, right))

    return values[0]


def format_operand(node: Node) -> str:
    """Render a subtree for error messages, without nesting noise for leaves."""
    if isinstance(node, BinaryNode):
        return f"({node})"
    return str(node)
