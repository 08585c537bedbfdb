"""Build a binary expression tree from a token sequence."""
from decimal import Decimal
import math
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_calculator.common.errors import (
    EmptyExpressionError,
    EndingWithOperatorError,
    ExpressionSyntaxError,
    OpeningWithOperatorError,
)
from arithmetic_calculator.common.tokens import Literal, Operator, Token


def format_number(value: float) -> str:
    """
    Format a float in plain decimal notation: ``2.0`` -> ``"2"``, ``1e20`` -> ``"100000000000000000000"``.

    :param float value: Number to format

    :return: Shortest round-trip digits, without exponent or trailing ``.0``
    :rtype: str
    """
    value = float(value)
    if not math.isfinite(value):
        return repr(value)

    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        return text[:-2]
    return text


class Leaf(BaseModel):
    """Tree node wrapping a single literal."""

    model_config = ConfigDict(frozen=True)

    literal: Literal

    def __str__(self) -> str:
        return format_number(self.literal.value)


class BinaryNode(BaseModel):
    """Tree node applying an operator to exactly two subtrees."""

    model_config = ConfigDict(frozen=True)

    operator: Operator
    left: "Node" = Field(..., description="Left operand subtree")
    right: "Node" = Field(..., description="Right operand subtree")

    def __str__(self) -> str:
        return render(self)


Node = Union[Leaf, BinaryNode]

BinaryNode.model_rebuild()


def render(root: Node) -> str:
    """
    Render a tree as nested calls, e.g. ``add(1, mult(2, 4))``.

    Uses an explicit stack, so tree height is not bounded by the recursion limit.

    :param Node root: Tree to render

    :return: Textual form of the tree
    :rtype: str
    """
    parts: List[str] = []
    stack: List[Union[Node, str]] = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Leaf):
            parts.append(str(item))
        else:
            # Pushed in reverse of output order
            stack.extend([")", item.right, ", ", item.left, f"{item.operator}("])
    return "".join(parts)


class _Slot:
    """Arena entry: one token, the subtree built for it so far, and its active neighbours."""

    __slots__ = ("token", "node", "prev", "next")

    def __init__(self, token: Token, index: int, count: int):
        self.token = token
        # Operators get a node once collapsed; literals are leaves from the start
        self.node: Optional[Node] = Leaf(literal=token) if isinstance(token, Literal) else None
        self.prev: Optional[int] = index - 1 if index > 0 else None
        self.next: Optional[int] = index + 1 if index + 1 < count else None

    @property
    def pending(self) -> bool:
        return self.node is None


class TreeBuilder:
    """
    Build an expression tree by repeatedly collapsing the highest-precedence operator.

    Algorithm:
        1. Put every token in an arena slot, linked to its neighbours by index
        2. Pick the pending operator with the highest precedence (leftmost on ties)
        3. Collapse it with its left and right neighbours into a BinaryNode
           that takes the operator's slot; unlink the neighbours
        4. Repeat until no operator is pending; one slot must remain

    Examples:
        - ``1 + 2 * 4 + 1`` collapses ``*`` first, then the left ``+``, then
          the right one, giving ``add(add(1, mult(2, 4)), 1)``
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.slots: List[_Slot] = [
            _Slot(token, i, len(self.tokens)) for i, token in enumerate(self.tokens)
        ]
        self.head: Optional[int] = 0 if self.slots else None

    def _active(self):
        """Yield the indices of the slots still linked in the sequence."""
        i = self.head
        while i is not None:
            yield i
            i = self.slots[i].next

    def _select(self) -> Optional[int]:
        best: Optional[int] = None
        best_precedence = 0
        for i in self._active():
            slot = self.slots[i]
            if not slot.pending:
                continue
            # Strictly higher only, so the leftmost wins ties
            if best is None or slot.token.precedence > best_precedence:
                best = i
                best_precedence = slot.token.precedence
        return best

    def _collapse(self, i: int) -> None:
        slot = self.slots[i]
        if slot.prev is None or slot.next is None:
            raise ExpressionSyntaxError(f"Operator '{slot.token.symbol}' is missing an operand")

        left = self.slots[slot.prev]
        right = self.slots[slot.next]
        if left.pending or right.pending:
            raise ExpressionSyntaxError(f"Operator '{slot.token.symbol}' cannot take another operator as operand")

        slot.node = BinaryNode(operator=slot.token, left=left.node, right=right.node)

        # Splice the operator into the neighbours' place
        slot.prev = left.prev
        if slot.prev is None:
            self.head = i
        else:
            self.slots[slot.prev].next = i

        slot.next = right.next
        if slot.next is not None:
            self.slots[slot.next].prev = i

    def run(self) -> Node:
        """
        Build and return the tree root.

        :return: Root of the expression tree
        :rtype: Node
        :raises OpeningWithOperatorError: If the first token is an operator
        :raises ExpressionSyntaxError: If the sequence is otherwise malformed
        """
        if not self.tokens:
            raise EmptyExpressionError("Empty expression")
        if isinstance(self.tokens[0], Operator):
            raise OpeningWithOperatorError(f"Expression cannot start with operator '{self.tokens[0].symbol}'")
        if isinstance(self.tokens[-1], Operator):
            raise EndingWithOperatorError(f"Expression cannot end with operator '{self.tokens[-1].symbol}'")

        while True:
            best = self._select()
            if best is None:
                break
            self._collapse(best)

        remaining = list(self._active())
        if len(remaining) != 1:
            raise ExpressionSyntaxError(f"Invalid expression (missing operator between {len(remaining)} operands)")
        return self.slots[remaining[0]].node


def build(tokens: Sequence[Token]) -> Node:
    """
    Build a binary expression tree from tokens.

    :param Sequence[Token] tokens: Output of the tokenizer

    :return: Root node
    :rtype: Node
    :raises OpeningWithOperatorError: If the first token is an operator
    :raises ExpressionSyntaxError: If the tokens do not form a binary expression
    """
    return TreeBuilder(tokens).run()
