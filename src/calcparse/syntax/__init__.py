"""
calcparse Syntax Package.

This package contains the expression-parsing core and its collaborators:
- Grammar: Matches text into atom/operator token sequences
- Precedence: Operator precedence levels and associativity
- Climber: Precedence climbing over token sequences
- Parser: Text to AST in one call
- AST: Node definitions for the expression tree
- Evaluator: i32 evaluation of expression trees
- Printer: Infix, S-expression and debug renderings
"""

from calcparse.syntax.ast_nodes import BinOp, Expr, ExprVisitor, Integer, Negate, Op
from calcparse.syntax.climber import PrecClimber
from calcparse.syntax.evaluator import Evaluator, evaluate
from calcparse.syntax.grammar import DEFAULT_MAX_DEPTH, Grammar
from calcparse.syntax.parser import (
    DEFAULT_CONFIG,
    ParseResult,
    Parser,
    ParserConfig,
    build_expr,
    parse,
    try_parse,
)
from calcparse.syntax.precedence import (
    DEFAULT_TABLE,
    Assoc,
    PrecedenceLevel,
    PrecedenceTable,
)
from calcparse.syntax.printer import format_tokens, to_debug, to_infix, to_sexpr
from calcparse.syntax.tokens import Token, TokenType

__all__ = [
    # AST
    "Expr",
    "ExprVisitor",
    "Integer",
    "BinOp",
    "Negate",
    "Op",
    # Grammar
    "Grammar",
    "Token",
    "TokenType",
    "DEFAULT_MAX_DEPTH",
    # Precedence
    "Assoc",
    "PrecedenceLevel",
    "PrecedenceTable",
    "DEFAULT_TABLE",
    "PrecClimber",
    # Parser
    "Parser",
    "ParserConfig",
    "ParseResult",
    "DEFAULT_CONFIG",
    "build_expr",
    "parse",
    "try_parse",
    # Collaborators
    "Evaluator",
    "evaluate",
    "to_infix",
    "to_sexpr",
    "to_debug",
    "format_tokens",
]
