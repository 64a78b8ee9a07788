"""
Precedence climbing over matched token sequences.

The climber knows nothing about the AST. Callers pass a ``primary``
callback that turns one atom token into a value and an ``infix`` callback
that combines two values with an operator token. Grouping decisions come
from the ``PrecedenceTable`` alone, so adding a level or an operator never
touches this module.
"""

from typing import Callable, Generic, Optional, Sequence, TypeVar

from calcparse.syntax.precedence import Assoc, PrecedenceTable
from calcparse.syntax.tokens import Token
from calcparse.utils.errors import InvariantError

T = TypeVar("T")

PrimaryFn = Callable[[Token], T]
InfixFn = Callable[[T, Token, T], T]


class _TokenCursor:
    """Read position over an alternating atom/operator sequence."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.tokens)

    def next_atom(self) -> Token:
        if self.exhausted:
            raise InvariantError(
                f"expected atom at token {self.pos}, found end of sequence"
            )
        token = self.tokens[self.pos]
        if not token.is_atom:
            raise InvariantError(
                f"expected atom at token {self.pos}, found {token.type.name}",
                token.location,
            )
        self.pos += 1
        return token

    def peek_operator(self) -> Optional[Token]:
        if self.exhausted:
            return None
        token = self.tokens[self.pos]
        if not token.is_operator:
            raise InvariantError(
                f"expected operator at token {self.pos}, found {token.type.name}",
                token.location,
            )
        return token


class PrecClimber(Generic[T]):
    """
    Builds a tree from a flat ``atom (op atom)*`` sequence.

    Operators waiting for their right operand sit on an explicit stack and
    are folded as soon as an operator that binds less tightly arrives, so
    chains of any length and either associativity never deepen the call
    stack.

    Usage:
        climber = PrecClimber(DEFAULT_TABLE)
        tree = climber.climb(tokens, primary, infix)
    """

    def __init__(self, table: PrecedenceTable) -> None:
        self.table = table

    def climb(
        self,
        tokens: Sequence[Token],
        primary: PrimaryFn,
        infix: InfixFn,
    ) -> T:
        """
        Climb a complete sequence starting at the lowest precedence.

        Raises:
            InvariantError: If the sequence is empty, does not alternate
                atoms and operators, ends with an operator, or uses an
                operator missing from the table.
        """
        cursor = _TokenCursor(tokens)
        operands = [primary(cursor.next_atom())]
        pending: list[tuple[Token, int]] = []

        while True:
            operator = cursor.peek_operator()
            if operator is None:
                break

            precedence, assoc = self._lookup(operator)
            # Left-associative operators fold an equal-precedence operator on their left
            while pending and (
                pending[-1][1] > precedence
                or (pending[-1][1] == precedence and assoc is Assoc.LEFT)
            ):
                self._fold(operands, pending, infix)

            cursor.pos += 1
            pending.append((operator, precedence))
            operands.append(primary(cursor.next_atom()))

        while pending:
            self._fold(operands, pending, infix)
        return operands[0]

    @staticmethod
    def _fold(operands: list, pending: list[tuple[Token, int]], infix: InfixFn) -> None:
        rhs = operands.pop()
        lhs = operands.pop()
        operator, _ = pending.pop()
        operands.append(infix(lhs, operator, rhs))

    def _lookup(self, operator: Token) -> tuple[int, Assoc]:
        if operator.value not in self.table:
            raise InvariantError(
                f"operator {operator.value!r} has no precedence level",
                operator.location,
            )
        return self.table.lookup(operator.value)
