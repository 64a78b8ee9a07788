"""
calcparse Utilities Package.

Error types and source locations shared by the parser and its drivers.
"""

from calcparse.utils.errors import (
    CalcParseError,
    EvaluationError,
    GrammarError,
    InvariantError,
    LiteralRangeError,
    NestingDepthError,
    ParseError,
    SourceLocation,
    source_line_at,
)

__all__ = [
    "CalcParseError",
    "ParseError",
    "GrammarError",
    "NestingDepthError",
    "LiteralRangeError",
    "InvariantError",
    "EvaluationError",
    "SourceLocation",
    "source_line_at",
]
