"""
Token definitions for the calcparse grammar.

The grammar does not produce a flat lexeme stream. Each expression becomes
an alternating sequence of atoms and operators, and the two compound atoms
(unary minus and parenthesized groups) carry their own nested sequence.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from calcparse.syntax.ast_nodes import Op
from calcparse.utils.errors import SourceLocation


class TokenType(Enum):
    """Enumeration of all token types produced by the grammar."""

    # Atoms
    INTEGER = auto()      # 42
    UNARY_MINUS = auto()  # -atom
    GROUP = auto()        # ( expr )

    # Binary operators
    OPERATOR = auto()     # + - * / %


# Single-character binary operators
OPERATOR_CHARS: dict[str, Op] = {
    "+": Op.ADD,
    "-": Op.SUBTRACT,
    "*": Op.MULTIPLY,
    "/": Op.DIVIDE,
    "%": Op.MODULO,
}

DIGITS = frozenset("0123456789")
WHITESPACE = frozenset(" \t\r\n")

ATOM_TYPES = frozenset({TokenType.INTEGER, TokenType.UNARY_MINUS, TokenType.GROUP})


@dataclass(slots=True)
class Token:
    """
    Represents a classified fragment of the input.

    Attributes:
        type: The type of this token
        value: Digit text for integers, the ``Op`` for operators, and the
            matched source text for unary minus and groups
        location: Source location where this token starts
        inner: Nested sequence for ``UNARY_MINUS`` (exactly one atom) and
            ``GROUP`` (a full expression); empty otherwise
    """

    type: TokenType
    value: Any
    location: SourceLocation
    inner: tuple["Token", ...] = ()

    def __repr__(self) -> str:
        if self.inner:
            return f"Token({self.type.name}, {self.inner!r}, {self.location})"
        return f"Token({self.type.name}, {self.value!r}, {self.location})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Token):
            return (
                self.type == other.type
                and self.value == other.value
                and self.inner == other.inner
            )
        if isinstance(other, TokenType):
            return self.type == other
        return NotImplemented

    @property
    def is_atom(self) -> bool:
        """Check if this token can stand as an operand."""
        return self.type in ATOM_TYPES

    @property
    def is_operator(self) -> bool:
        """Check if this token is a binary operator."""
        return self.type == TokenType.OPERATOR
