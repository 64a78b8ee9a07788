"""
calcparse - Arithmetic expression parsing by precedence climbing.

Parses integer arithmetic with ``+ - * / %``, parentheses and unary minus
into an immutable AST that respects operator precedence and
left-associativity.
"""

from calcparse.syntax import (
    BinOp,
    Expr,
    Integer,
    Negate,
    Op,
    Parser,
    ParserConfig,
    ParseResult,
    evaluate,
    parse,
    try_parse,
)
from calcparse.utils.errors import (
    CalcParseError,
    GrammarError,
    LiteralRangeError,
    ParseError,
)

__version__ = "0.1.0"
__all__ = [
    "parse",
    "try_parse",
    "evaluate",
    "Parser",
    "ParserConfig",
    "ParseResult",
    "Expr",
    "Integer",
    "BinOp",
    "Negate",
    "Op",
    "CalcParseError",
    "ParseError",
    "GrammarError",
    "LiteralRangeError",
]
