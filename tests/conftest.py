"""
Pytest configuration and shared fixtures for calcparse tests.
"""

import pytest

from calcparse.syntax.ast_nodes import Expr
from calcparse.syntax.evaluator import evaluate
from calcparse.syntax.grammar import Grammar
from calcparse.syntax.parser import Parser, ParserConfig
from calcparse.syntax.tokens import Token


@pytest.fixture
def grammar_factory():
    """Factory fixture for creating grammars."""

    def _create_grammar(**kwargs) -> Grammar:
        return Grammar(**kwargs)

    return _create_grammar


@pytest.fixture
def tokenize(grammar_factory):
    """Fixture to match source text into a token sequence."""

    def _tokenize(source: str) -> tuple[Token, ...]:
        return grammar_factory().match(source)

    return _tokenize


@pytest.fixture
def parser_factory():
    """Factory fixture for creating parsers."""

    def _create_parser(config: ParserConfig | None = None) -> Parser:
        return Parser(config)

    return _create_parser


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source text into an AST."""

    def _parse(source: str) -> Expr:
        return parser_factory().parse(source)

    return _parse


@pytest.fixture
def evaluate_source(parse):
    """Fixture to parse and evaluate source text."""

    def _evaluate(source: str) -> int:
        return evaluate(parse(source))

    return _evaluate
