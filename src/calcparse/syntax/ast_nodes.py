"""
Abstract Syntax Tree (AST) node definitions for calcparse.

An expression tree is built from three node types: integer literals,
binary operations and negation. Nodes are immutable and each child is
owned by exactly one parent. Source locations are carried for error
reporting but do not take part in equality, so two trees parsed from
differently spaced text compare equal when their shapes match.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator, Optional

import numpy as np

from calcparse.utils.errors import LiteralRangeError, SourceLocation

# Range of the integer type literals and results must fit in
I32 = np.iinfo(np.int32)
I32_MIN = int(I32.min)
I32_MAX = int(I32.max)


class Op(Enum):
    """Binary operator types."""

    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()

    @property
    def symbol(self) -> str:
        """The source character for this operator."""
        return _OP_SYMBOLS[self]

    @property
    def display_name(self) -> str:
        """CamelCase name used by the debug printer (``Add``, ``Subtract``)."""
        return self.name.capitalize()


_OP_SYMBOLS: dict[Op, str] = {
    Op.ADD: "+",
    Op.SUBTRACT: "-",
    Op.MULTIPLY: "*",
    Op.DIVIDE: "/",
    Op.MODULO: "%",
}


class Expr(ABC):
    """
    Base class for all expression nodes.

    Left-associative chains make trees as deep as they are long, so every
    whole-tree operation here (equality, hashing, repr, visiting) walks
    with an explicit stack instead of recursing.
    """

    location: Optional[SourceLocation]

    @property
    @abstractmethod
    def children(self) -> tuple["Expr", ...]:
        """Direct subexpressions, left to right."""
        pass

    @abstractmethod
    def _label(self) -> tuple:
        """The node's own data, excluding children and location."""
        pass

    @abstractmethod
    def accept(self, visitor: "ExprVisitor", *results: Any) -> Any:
        """Accept a visitor, passing along the results for ``children``."""
        pass

    def walk(self) -> Iterator["Expr"]:
        """Yield every node in pre-order."""
        stack: list[Expr] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expr):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            lhs, rhs = pairs.pop()
            if type(lhs) is not type(rhs) or lhs._label() != rhs._label():
                return False
            pairs.extend(zip(lhs.children, rhs.children))
        return True

    def __hash__(self) -> int:
        # Pre-order labels identify the shape, since each node type has a fixed arity
        return hash(tuple((type(node).__name__, node._label()) for node in self.walk()))

    def __repr__(self) -> str:
        from calcparse.syntax.printer import to_debug

        return to_debug(self)


class ExprVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Traversal is post-order: ``visit_bin_op`` and ``visit_negate`` receive
    the already computed results for their children along with the node.
    Implement this to create custom tree processors (evaluators,
    analyzers).
    """

    def visit(self, node: Expr) -> Any:
        """Fold the tree rooted at ``node`` bottom-up."""
        results: list[Any] = []
        stack: list[tuple[Expr, bool]] = [(node, False)]
        while stack:
            current, expanded = stack.pop()
            children = current.children
            if children and not expanded:
                stack.append((current, True))
                stack.extend((child, False) for child in reversed(children))
                continue
            args = results[len(results) - len(children):]
            del results[len(results) - len(children):]
            results.append(current.accept(self, *args))
        return results.pop()

    @abstractmethod
    def visit_integer(self, node: "Integer") -> Any:
        pass

    @abstractmethod
    def visit_bin_op(self, node: "BinOp", lhs: Any, rhs: Any) -> Any:
        pass

    @abstractmethod
    def visit_negate(self, node: "Negate", operand: Any) -> Any:
        pass


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class Integer(Expr):
    """
    An integer literal.

    Literals come from digit runs, so the value is never negative; a
    leading minus is always a separate ``Negate`` node.
    """

    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"integer literal must be non-negative, got {self.value}")
        if self.value > I32_MAX:
            raise LiteralRangeError(str(self.value), self.location)

    @classmethod
    def from_text(
        cls, text: str, location: Optional[SourceLocation] = None
    ) -> "Integer":
        """
        Build a literal from a matched digit run.

        Raises:
            LiteralRangeError: If the digits do not fit in a 32-bit signed
                integer.
        """
        # Long digit runs are rejected before int() hits the str-conversion limit
        digits = text.lstrip("0")
        if len(digits) > len(str(I32_MAX)) or (digits and int(digits) > I32_MAX):
            raise LiteralRangeError(text, location)
        return cls(int(digits or "0"), location)

    @property
    def children(self) -> tuple[Expr, ...]:
        return ()

    def _label(self) -> tuple:
        return (self.value,)

    def accept(self, visitor: ExprVisitor, *results: Any) -> Any:
        return visitor.visit_integer(self)


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class BinOp(Expr):
    """
    A binary operation.

    Example:
        1 + 2, (3 - 4) * 5
    """

    lhs: Expr
    op: Op
    rhs: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def children(self) -> tuple[Expr, ...]:
        return (self.lhs, self.rhs)

    def _label(self) -> tuple:
        return (self.op,)

    def accept(self, visitor: ExprVisitor, *results: Any) -> Any:
        return visitor.visit_bin_op(self, *results)


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class Negate(Expr):
    """
    Unary minus applied to an atom.

    Example:
        -2, -(1 + 3)
    """

    operand: Expr
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def children(self) -> tuple[Expr, ...]:
        return (self.operand,)

    def _label(self) -> tuple:
        return ()

    def accept(self, visitor: ExprVisitor, *results: Any) -> Any:
        return visitor.visit_negate(self, *results)
