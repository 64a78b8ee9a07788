"""
Operator precedence declarations for calcparse.

A ``PrecedenceTable`` lists precedence levels from lowest to highest. Each
level groups operators that bind equally tight and share one associativity.
Tables are immutable values: build one, hand it to the parser through
``ParserConfig``, and extend it by deriving a new table.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable

from calcparse.syntax.ast_nodes import Op


class Assoc(Enum):
    """Associativity of a precedence level."""

    LEFT = auto()
    RIGHT = auto()


@dataclass(frozen=True, slots=True)
class PrecedenceLevel:
    """
    One precedence level.

    Attributes:
        operators: Operators sharing this level
        assoc: How chains of these operators group
    """

    operators: frozenset[Op]
    assoc: Assoc = Assoc.LEFT


@dataclass(frozen=True)
class PrecedenceTable:
    """
    Ordered precedence levels, lowest first.

    Lookup goes through a map built once at construction. Every operator
    may appear in at most one level.
    """

    levels: tuple[PrecedenceLevel, ...]
    _index: dict[Op, tuple[int, Assoc]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: dict[Op, tuple[int, Assoc]] = {}
        for precedence, level in enumerate(self.levels):
            for op in level.operators:
                if op in index:
                    raise ValueError(
                        f"operator {op.name} declared at levels "
                        f"{index[op][0]} and {precedence}"
                    )
                index[op] = (precedence, level.assoc)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_levels(
        cls, *levels: tuple[Iterable[Op], Assoc]
    ) -> "PrecedenceTable":
        """
        Build a table from ``(operators, assoc)`` pairs, lowest first.

        Example:
            PrecedenceTable.from_levels(
                ({Op.ADD, Op.SUBTRACT}, Assoc.LEFT),
                ({Op.MULTIPLY, Op.DIVIDE}, Assoc.LEFT),
            )
        """
        return cls(
            tuple(PrecedenceLevel(frozenset(ops), assoc) for ops, assoc in levels)
        )

    @property
    def lowest(self) -> int:
        """Precedence of the loosest-binding level."""
        return 0

    @property
    def operators(self) -> frozenset[Op]:
        """Every operator declared in this table."""
        return frozenset(self._index)

    def __contains__(self, op: object) -> bool:
        return op in self._index

    def lookup(self, op: Op) -> tuple[int, Assoc]:
        """
        Return ``(precedence, assoc)`` for ``op``.

        Raises:
            KeyError: If ``op`` is not declared in this table.
        """
        return self._index[op]

    def extended(self, operators: Iterable[Op], assoc: Assoc = Assoc.LEFT) -> "PrecedenceTable":
        """Return a new table with one more level binding tighter than all others."""
        return PrecedenceTable(
            self.levels + (PrecedenceLevel(frozenset(operators), assoc),)
        )


DEFAULT_TABLE = PrecedenceTable.from_levels(
    ({Op.ADD, Op.SUBTRACT}, Assoc.LEFT),
    ({Op.MULTIPLY, Op.DIVIDE, Op.MODULO}, Assoc.LEFT),
)
