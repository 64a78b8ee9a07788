"""
calcparse Parser.

Runs the two-stage pipeline: the grammar turns text into a token sequence,
then precedence climbing turns the sequence into an AST. Groups and unary
minus are resolved while building atoms, so parentheses reset precedence
and unary minus binds tighter than every binary operator.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from calcparse.syntax.ast_nodes import BinOp, Expr, Integer, Negate
from calcparse.syntax.climber import PrecClimber
from calcparse.syntax.grammar import DEFAULT_MAX_DEPTH, Grammar
from calcparse.syntax.precedence import DEFAULT_TABLE, PrecedenceTable
from calcparse.syntax.tokens import Token, TokenType
from calcparse.utils.errors import (
    InvariantError,
    LiteralRangeError,
    ParseError,
    source_line_at,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParserConfig:
    """
    Parser configuration.

    Attributes:
        table: Operator precedence levels, lowest first
        max_depth: Deepest allowed nesting of groups and unary minus
    """

    table: PrecedenceTable = DEFAULT_TABLE
    max_depth: int = DEFAULT_MAX_DEPTH


DEFAULT_CONFIG = ParserConfig()


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one expression: exactly one of ``expr`` or ``error``."""

    expr: Optional[Expr] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Expr:
        """Return the expression or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.expr


def build_expr(tokens: Sequence[Token], table: PrecedenceTable = DEFAULT_TABLE) -> Expr:
    """
    Build an AST from a matched expr sequence.

    Raises:
        LiteralRangeError: If an integer literal does not fit in i32.
        InvariantError: If ``tokens`` is not a valid alternating sequence.
    """
    climber: PrecClimber[Expr] = PrecClimber(table)

    def primary(token: Token) -> Expr:
        if token.type == TokenType.INTEGER:
            return Integer.from_text(token.value, token.location)
        if token.type == TokenType.GROUP:
            # Parentheses restart at the lowest precedence
            return climber.climb(token.inner, primary, infix)
        if token.type == TokenType.UNARY_MINUS:
            return Negate(climber.climb(token.inner, primary, infix), token.location)
        raise InvariantError(
            f"expected atom, found {token.type.name}", token.location
        )

    def infix(lhs: Expr, operator: Token, rhs: Expr) -> Expr:
        if operator.type != TokenType.OPERATOR:
            raise InvariantError(
                f"expected infix operator, found {operator.type.name}",
                operator.location,
            )
        return BinOp(lhs, operator.value, rhs, operator.location)

    return climber.climb(tokens, primary, infix)


class Parser:
    """
    Parses single-line arithmetic expressions into ASTs.

    Usage:
        parser = Parser()
        expr = parser.parse("1 + 2 * 3")
    """

    def __init__(self, config: Optional[ParserConfig] = None, filename: Optional[str] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.filename = filename

    def parse(self, source: str) -> Expr:
        """
        Parse ``source`` into an expression tree.

        Raises:
            GrammarError: If the text does not match the grammar.
            LiteralRangeError: If a literal overflows i32.
            InvariantError: If the grammar produced a malformed sequence.
        """
        grammar = Grammar(
            max_depth=self.config.max_depth,
            operators=self.config.table.operators,
            filename=self.filename,
        )
        tokens = grammar.match(source)
        try:
            expr = build_expr(tokens, self.config.table)
        except LiteralRangeError as e:
            if e.location is None or e.source_line is not None:
                raise
            raise LiteralRangeError(
                e.text, e.location, source_line_at(source, e.location.offset)
            ) from None
        logger.debug("parsed %r into %r", source, expr)
        return expr

    def try_parse(self, source: str) -> ParseResult:
        """Parse ``source`` and return failures as values instead of raising."""
        try:
            return ParseResult(expr=self.parse(source))
        except ParseError as e:
            logger.debug("parse of %r failed: %s", source, e.message)
            return ParseResult(error=e)


def parse(source: str, config: Optional[ParserConfig] = None) -> Expr:
    """Convenience function to parse one expression."""
    return Parser(config).parse(source)


def try_parse(source: str, config: Optional[ParserConfig] = None) -> ParseResult:
    """Convenience function to parse one expression without raising ParseError."""
    return Parser(config).try_parse(source)
