"""
Renderers for expression trees and matched token sequences.

``to_infix`` output is fully parenthesized, so parsing it again yields an
equal tree. ``to_debug`` produces the ``BinOp { lhs: ..., op: ..., rhs: ... }``
dump used by the command-line driver.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Union

from calcparse.syntax.ast_nodes import BinOp, Expr, Integer, Negate
from calcparse.syntax.tokens import Token, TokenType

INDENT = "    "

# Literal output text, or a subtree still to be rendered at a nesting level
Piece = Union[str, tuple[Expr, int]]


class TreePrinter(ABC):
    """
    Base class for tree renderers.

    Subclasses describe one node at a time as a list of pieces. ``render``
    expands the pieces with an explicit stack and joins the text once, so
    rendering a long operator chain neither recurses nor copies strings
    per level.
    """

    def render(self, expr: Expr) -> str:
        out: list[str] = []
        stack: list[Piece] = [(expr, 0)]
        while stack:
            piece = stack.pop()
            if isinstance(piece, str):
                out.append(piece)
                continue
            node, level = piece
            if isinstance(node, Integer):
                out.append(self.integer(node))
            elif isinstance(node, BinOp):
                stack.extend(reversed(self.bin_op(node, level)))
            elif isinstance(node, Negate):
                stack.extend(reversed(self.negate(node, level)))
            else:
                raise TypeError(f"cannot render {type(node).__name__}")
        return "".join(out)

    @abstractmethod
    def integer(self, node: Integer) -> str:
        pass

    @abstractmethod
    def bin_op(self, node: BinOp, level: int) -> list[Piece]:
        pass

    @abstractmethod
    def negate(self, node: Negate, level: int) -> list[Piece]:
        pass


class InfixPrinter(TreePrinter):
    """Renders ``(lhs op rhs)`` with every binary operation parenthesized."""

    def integer(self, node: Integer) -> str:
        return str(node.value)

    def bin_op(self, node: BinOp, level: int) -> list[Piece]:
        return ["(", (node.lhs, level), f" {node.op.symbol} ", (node.rhs, level), ")"]

    def negate(self, node: Negate, level: int) -> list[Piece]:
        return ["-", (node.operand, level)]


class SExprPrinter(TreePrinter):
    """Renders prefix S-expressions: ``(+ 1 (* 2 3))``, ``(neg 2)``."""

    def integer(self, node: Integer) -> str:
        return str(node.value)

    def bin_op(self, node: BinOp, level: int) -> list[Piece]:
        return [f"({node.op.symbol} ", (node.lhs, level), " ", (node.rhs, level), ")"]

    def negate(self, node: Negate, level: int) -> list[Piece]:
        return ["(neg ", (node.operand, level), ")"]


class DebugPrinter(TreePrinter):
    """
    Renders the tree structure with node and operator names.

    In pretty mode every node field goes on its own line, indented by
    nesting level.
    """

    def __init__(self, pretty: bool = False) -> None:
        self.pretty = pretty

    def integer(self, node: Integer) -> str:
        return f"Integer({node.value})"

    def bin_op(self, node: BinOp, level: int) -> list[Piece]:
        child = level + 1
        name = node.op.display_name
        if not self.pretty:
            return [
                "BinOp { lhs: ",
                (node.lhs, child),
                f", op: {name}, rhs: ",
                (node.rhs, child),
                " }",
            ]
        pad = INDENT * child
        return [
            f"BinOp {{\n{pad}lhs: ",
            (node.lhs, child),
            f",\n{pad}op: {name},\n{pad}rhs: ",
            (node.rhs, child),
            f",\n{INDENT * level}}}",
        ]

    def negate(self, node: Negate, level: int) -> list[Piece]:
        child = level + 1
        if not self.pretty:
            return ["Negate(", (node.operand, child), ")"]
        return [
            f"Negate(\n{INDENT * child}",
            (node.operand, child),
            f",\n{INDENT * level})",
        ]


def to_infix(expr: Expr) -> str:
    return InfixPrinter().render(expr)


def to_sexpr(expr: Expr) -> str:
    return SExprPrinter().render(expr)


def to_debug(expr: Expr, pretty: bool = False) -> str:
    return DebugPrinter(pretty).render(expr)


def format_tokens(tokens: Sequence[Token], indent: int = 0) -> str:
    """
    Render a matched token sequence as an indented outline.

    Example for ``-(1 + 2) * 3``::

        unary_minus "-(1 + 2)" @0
          group "(1 + 2)" @1
            integer "1" @2
            bin_op + @4
            integer "2" @6
        bin_op * @9
        integer "3" @11
    """
    lines: list[str] = []
    prefix = "  " * indent
    for token in tokens:
        offset = token.location.offset
        if token.type == TokenType.OPERATOR:
            lines.append(f"{prefix}bin_op {token.value.symbol} @{offset}")
        else:
            lines.append(f'{prefix}{token.type.name.lower()} "{token.value}" @{offset}')
        if token.inner:
            lines.append(format_tokens(token.inner, indent + 1))
    return "\n".join(lines)
