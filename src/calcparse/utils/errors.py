"""
Error types and source location tracking for calcparse.

Parse failures are recoverable and belong to one input line. Invariant
failures mean the grammar handed the climber a sequence it can never
produce and are programming defects.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source text.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        offset: 0-indexed character offset from start of source
        filename: Optional filename for error reporting
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"

    @classmethod
    def at_offset(
        cls, source: str, offset: int, filename: Optional[str] = None
    ) -> "SourceLocation":
        """Build a location from a character offset into ``source``."""
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            line=line,
            column=offset - line_start + 1,
            offset=offset,
            filename=filename,
        )


def source_line_at(source: str, offset: int) -> str:
    """Extract the line of ``source`` containing ``offset``."""
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end == -1:
        end = len(source)
    return source[start:end]


class CalcParseError(Exception):
    """Base exception for all calcparse errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"[{self.location}]")

        parts.append(self.message)

        if self.source_line is not None and self.location:
            parts.append(f"\n    {self.source_line}")
            # Caret under the error column
            padding = " " * (4 + self.location.column - 1)
            parts.append(f"\n{padding}^")

        if self.source_line is None or not self.location:
            return " ".join(parts)
        return " ".join(parts[:2]) + "".join(parts[2:])

    @property
    def offset(self) -> Optional[int]:
        """The 0-based character offset of the failure, if known."""
        return self.location.offset if self.location else None


class ParseError(CalcParseError):
    """Raised when a single expression cannot be turned into an AST."""

    pass


class GrammarError(ParseError):
    """
    Raised when the input does not match a grammar rule.

    Attributes:
        rule: Name of the rule that failed (``atom``, ``group``, ``expr``)
        expected: Human-readable description of what was expected
    """

    def __init__(
        self,
        rule: str,
        expected: str,
        location: SourceLocation,
        source_line: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.rule = rule
        self.expected = expected
        super().__init__(message or f"expected {expected}", location, source_line)


class NestingDepthError(GrammarError):
    """Raised when parentheses or unary minus nest deeper than allowed."""

    def __init__(
        self,
        limit: int,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> None:
        self.limit = limit
        super().__init__(
            "atom",
            "shallower nesting",
            location,
            source_line,
            message=f"nesting depth exceeds limit of {limit}",
        )


class LiteralRangeError(ParseError):
    """Raised when a digit run does not fit in a 32-bit signed integer."""

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.text = text
        super().__init__(
            f"number too large to fit in i32: {text}", location, source_line
        )


class InvariantError(CalcParseError):
    """Raised when the climber receives a malformed token sequence."""

    pass


class EvaluationError(CalcParseError):
    """Raised when evaluating an AST overflows or divides by zero."""

    pass
