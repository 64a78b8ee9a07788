"""
Unit tests for the calcparse Grammar.
"""

import pytest

from calcparse.syntax.ast_nodes import Op
from calcparse.syntax.grammar import Grammar
from calcparse.syntax.tokens import Token, TokenType
from calcparse.utils.errors import GrammarError, NestingDepthError


def _types(tokens):
    return [t.type for t in tokens]


class TestGrammarAtoms:
    """Tests for the atom alternatives."""

    def test_single_integer(self, tokenize):
        tokens = tokenize("42")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].value == "42"

    def test_integer_is_greedy(self, tokenize):
        tokens = tokenize("12345")
        assert [t.value for t in tokens] == ["12345"]

    def test_leading_zeros_kept_in_text(self, tokenize):
        assert tokenize("007")[0].value == "007"

    def test_unary_minus_wraps_one_atom(self, tokenize):
        tokens = tokenize("-7")
        assert len(tokens) == 1
        token = tokens[0]
        assert token.type == TokenType.UNARY_MINUS
        assert len(token.inner) == 1
        assert token.inner[0].type == TokenType.INTEGER
        assert token.inner[0].value == "7"

    def test_unary_minus_allows_whitespace(self, tokenize):
        tokens = tokenize("- 7")
        assert tokens[0].type == TokenType.UNARY_MINUS
        assert tokens[0].inner[0].value == "7"

    def test_double_unary_minus(self, tokenize):
        tokens = tokenize("--3")
        outer = tokens[0]
        assert outer.type == TokenType.UNARY_MINUS
        assert outer.inner[0].type == TokenType.UNARY_MINUS
        assert outer.inner[0].inner[0].value == "3"

    def test_group_holds_full_expression(self, tokenize):
        tokens = tokenize("(1 + 2)")
        assert len(tokens) == 1
        group = tokens[0]
        assert group.type == TokenType.GROUP
        assert _types(group.inner) == [
            TokenType.INTEGER,
            TokenType.OPERATOR,
            TokenType.INTEGER,
        ]
        assert group.value == "(1 + 2)"

    def test_unary_minus_applies_to_group(self, tokenize):
        tokens = tokenize("-(2 + 5)")
        assert tokens[0].type == TokenType.UNARY_MINUS
        assert tokens[0].inner[0].type == TokenType.GROUP


class TestGrammarExpressions:
    """Tests for the expr rule and whitespace handling."""

    def test_alternating_sequence(self, tokenize):
        tokens = tokenize("1 + 2 * 3 - 4 / 5 % 6")
        assert len(tokens) == 11
        for i, token in enumerate(tokens):
            assert token.is_atom if i % 2 == 0 else token.is_operator

    @pytest.mark.parametrize(
        "char, op",
        [("+", Op.ADD), ("-", Op.SUBTRACT), ("*", Op.MULTIPLY), ("/", Op.DIVIDE), ("%", Op.MODULO)],
    )
    def test_operator_kinds(self, tokenize, char, op):
        tokens = tokenize(f"1 {char} 2")
        assert tokens[1].type == TokenType.OPERATOR
        assert tokens[1].value == op

    def test_minus_after_atom_is_subtraction(self, tokenize):
        tokens = tokenize("1-2")
        assert _types(tokens) == [TokenType.INTEGER, TokenType.OPERATOR, TokenType.INTEGER]
        assert tokens[1].value == Op.SUBTRACT

    def test_minus_after_operator_is_unary(self, tokenize):
        tokens = tokenize("1 - -2")
        assert tokens[1].value == Op.SUBTRACT
        assert tokens[2].type == TokenType.UNARY_MINUS

    def test_whitespace_is_ignored(self, tokenize):
        assert tokenize("  1+2 ") == tokenize("1 + 2")
        assert tokenize("\t(1\t*2 )") == tokenize("(1 * 2)")

    def test_token_offsets(self, tokenize):
        tokens = tokenize("10 + (2)")
        assert [t.location.offset for t in tokens] == [0, 3, 5]
        assert tokens[2].inner[0].location.offset == 6
        assert tokens[2].inner[0].location.column == 7

    def test_token_equality_ignores_location(self):
        a = Token(TokenType.INTEGER, "1", location=None)
        b = Token(TokenType.INTEGER, "1", location=None)
        assert a == b
        assert a == TokenType.INTEGER


class TestGrammarErrors:
    """Tests for grammar failures and their offsets."""

    @pytest.mark.parametrize(
        "source, rule, offset",
        [
            ("1 +", "atom", 3),
            ("(1 + 2", "group", 6),
            ("1 2", "expr", 2),
            ("", "atom", 0),
            ("   ", "atom", 3),
            ("1 + a", "atom", 4),
            ("1 * * 2", "atom", 4),
            (")", "atom", 0),
            ("(", "atom", 1),
            ("()", "atom", 1),
            ("1 + 2)", "expr", 5),
            ("--", "atom", 2),
            ("1.5", "expr", 1),
            ("((1)", "group", 4),
        ],
    )
    def test_failure_rule_and_offset(self, tokenize, source, rule, offset):
        with pytest.raises(GrammarError) as exc_info:
            tokenize(source)
        assert exc_info.value.rule == rule
        assert exc_info.value.offset == offset

    def test_missing_paren_names_expected_character(self, tokenize):
        with pytest.raises(GrammarError) as exc_info:
            tokenize("(1 + 2")
        assert exc_info.value.expected == "`)`"
        assert "expected `)`" in str(exc_info.value)

    def test_missing_operand_message(self, tokenize):
        with pytest.raises(GrammarError) as exc_info:
            tokenize("1 +")
        assert exc_info.value.message == "expected atom"

    def test_error_renders_caret(self, tokenize):
        with pytest.raises(GrammarError) as exc_info:
            tokenize("1 + x")
        rendered = str(exc_info.value)
        assert rendered.startswith("[1:5] expected atom")
        lines = rendered.splitlines()
        assert lines[1] == "    1 + x"
        assert lines[2] == "        ^"

    def test_digits_must_be_ascii(self, tokenize):
        with pytest.raises(GrammarError):
            tokenize("١")  # ARABIC-INDIC DIGIT ONE


class TestGrammarConfiguration:
    """Tests for depth limits and operator sets."""

    def test_depth_limit_on_groups(self, grammar_factory):
        grammar = grammar_factory(max_depth=3)
        grammar.match("(((1)))")
        with pytest.raises(NestingDepthError) as exc_info:
            grammar.match("((((1))))")
        assert exc_info.value.limit == 3
        assert exc_info.value.offset == 3

    def test_depth_limit_on_unary_minus(self, grammar_factory):
        grammar = grammar_factory(max_depth=2)
        grammar.match("--1")
        with pytest.raises(NestingDepthError):
            grammar.match("---1")

    def test_depth_limit_is_a_grammar_error(self, grammar_factory):
        with pytest.raises(GrammarError):
            grammar_factory(max_depth=1).match("((1))")

    def test_depth_counts_nesting_not_total_groups(self, grammar_factory):
        grammar = grammar_factory(max_depth=1)
        tokens = grammar.match("(1) + (2) + (3) + -4")
        assert len(tokens) == 7

    def test_default_depth_handles_deep_input(self, tokenize):
        source = "(" * 100 + "1" + ")" * 100
        tokens = tokenize(source)
        assert tokens[0].type == TokenType.GROUP

    def test_restricted_operators(self, grammar_factory):
        grammar = grammar_factory(operators={Op.ADD, Op.SUBTRACT})
        grammar.match("1 + 2 - 3")
        with pytest.raises(GrammarError) as exc_info:
            grammar.match("1 % 2")
        assert exc_info.value.rule == "expr"
        assert exc_info.value.offset == 2

    def test_grammar_is_reusable(self):
        grammar = Grammar()
        first = grammar.match("1 + 2")
        with pytest.raises(GrammarError):
            grammar.match("1 +")
        assert grammar.match("1 + 2") == first
