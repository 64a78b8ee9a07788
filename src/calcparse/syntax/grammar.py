"""
calcparse Grammar (Tokenizer).

Matches raw text against the expression grammar and returns the classified
token sequence for the top-level expression:

    integer     = ASCII_DIGIT+                      (no inner whitespace)
    unary_minus = "-" atom
    group       = "(" expr ")"
    atom        = integer | unary_minus | group     (first match wins)
    bin_op      = "+" | "-" | "*" | "/" | "%"
    expr        = atom (bin_op atom)*
    equation    = SOI expr EOI

Whitespace is skipped around atoms and operators. A failure names the rule
that could not match and the offset where matching stopped; no partial
sequence is ever returned.
"""

import logging
from typing import Iterable, Optional

from calcparse.syntax.ast_nodes import Op
from calcparse.syntax.tokens import (
    DIGITS,
    OPERATOR_CHARS,
    WHITESPACE,
    Token,
    TokenType,
)
from calcparse.utils.errors import (
    GrammarError,
    NestingDepthError,
    SourceLocation,
    source_line_at,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 128


class Grammar:
    """
    Recursive matcher for the expression grammar.

    Each rule is a method that starts at the current position and either
    returns its tokens with the position advanced past them or raises
    ``GrammarError``.

    Usage:
        grammar = Grammar()
        tokens = grammar.match("1 + 2 * 3")
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        operators: Optional[Iterable[Op]] = None,
        filename: Optional[str] = None,
    ) -> None:
        """
        Initialize the grammar.

        Args:
            max_depth: Deepest allowed nesting of groups and unary minus
            operators: Binary operators to recognize (default: all of them).
                Restricting this keeps input from producing operators a
                precedence table does not declare.
            filename: Optional filename for error reporting
        """
        self.max_depth = max_depth
        self.operators = (
            frozenset(OPERATOR_CHARS.values()) if operators is None else frozenset(operators)
        )
        self.filename = filename
        self.source = ""
        self.pos = 0
        self._depth = 0

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _location(self, offset: Optional[int] = None) -> SourceLocation:
        """Create a SourceLocation for ``offset`` (default: current position)."""
        return SourceLocation.at_offset(
            self.source, self.pos if offset is None else offset, self.filename
        )

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _skip_whitespace(self) -> None:
        while self._current_char is not None and self._current_char in WHITESPACE:
            self._advance()

    def _fail(self, rule: str, expected: str) -> GrammarError:
        return GrammarError(
            rule,
            expected,
            self._location(),
            source_line_at(self.source, self.pos),
        )

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def match(self, source: str) -> tuple[Token, ...]:
        """
        Match ``source`` as a complete expression.

        Returns:
            The alternating atom/operator sequence of the top-level expr.

        Raises:
            GrammarError: If any rule fails to match.
        """
        self.source = source
        self.pos = 0
        self._depth = 0

        self._skip_whitespace()
        tokens = self._match_expr()
        self._skip_whitespace()
        if self._current_char is not None:
            raise self._fail("expr", "operator or end of input")

        logger.debug("matched %d top-level tokens from %r", len(tokens), source)
        return tokens

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _match_expr(self) -> tuple[Token, ...]:
        """expr = atom (bin_op atom)*"""
        tokens = [self._match_atom()]

        while True:
            self._skip_whitespace()
            operator = self._match_bin_op()
            if operator is None:
                break
            tokens.append(operator)
            self._skip_whitespace()
            tokens.append(self._match_atom())

        return tuple(tokens)

    def _match_atom(self) -> Token:
        """atom = integer | unary_minus | group"""
        char = self._current_char

        if char is not None and char in DIGITS:
            return self._match_integer()
        if char == "-":
            return self._nested(self._match_unary_minus)
        if char == "(":
            return self._nested(self._match_group)

        raise self._fail("atom", "atom")

    def _nested(self, rule) -> Token:
        """Run a compound-atom rule one nesting level deeper."""
        if self._depth >= self.max_depth:
            raise NestingDepthError(
                self.max_depth,
                self._location(),
                source_line_at(self.source, self.pos),
            )
        self._depth += 1
        try:
            return rule()
        finally:
            self._depth -= 1

    def _match_integer(self) -> Token:
        """integer = ASCII_DIGIT+ (greedy)"""
        start = self.pos
        while self._current_char is not None and self._current_char in DIGITS:
            self._advance()
        text = self.source[start:self.pos]
        return Token(TokenType.INTEGER, text, self._location(start))

    def _match_unary_minus(self) -> Token:
        """unary_minus = "-" atom"""
        start = self.pos
        self._advance()  # -
        self._skip_whitespace()
        operand = self._match_atom()
        return Token(
            TokenType.UNARY_MINUS,
            self.source[start:self.pos],
            self._location(start),
            (operand,),
        )

    def _match_group(self) -> Token:
        """group = "(" expr ")" """
        start = self.pos
        self._advance()  # (
        self._skip_whitespace()
        inner = self._match_expr()
        self._skip_whitespace()
        if self._current_char != ")":
            raise self._fail("group", "`)`")
        self._advance()  # )
        return Token(
            TokenType.GROUP,
            self.source[start:self.pos],
            self._location(start),
            inner,
        )

    def _match_bin_op(self) -> Optional[Token]:
        """bin_op = "+" | "-" | "*" | "/" | "%" (None when absent)"""
        char = self._current_char
        if char is None or OPERATOR_CHARS.get(char) not in self.operators:
            return None
        location = self._location()
        self._advance()
        return Token(TokenType.OPERATOR, OPERATOR_CHARS[char], location)
