"""
Tests for the calcparse REPL (Read-Eval-Print Loop).

Tests cover:
- Expression evaluation
- Error reporting for parse and evaluation failures
- Command handling (:help, :ast, :tree, :tokens, :sexpr, :history, ...)
- The main loop's exit paths
"""

from unittest.mock import patch

import pytest

from calcparse.repl import Colors, QuitREPL, REPLSession
from calcparse.syntax.parser import ParserConfig


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def no_colors():
    """Keep assertions independent of terminal color support."""
    Colors.disable()


@pytest.fixture
def session():
    """Create a fresh REPL session for testing."""
    return REPLSession()


# =============================================================================
# Evaluation Tests
# =============================================================================


class TestREPLEvaluation:
    """Tests for evaluating plain expression lines."""

    def test_blank_line(self, session):
        assert session.eval_line("   ") is None
        assert session.history == []

    def test_expression_value(self, session):
        assert session.eval_line("1 + 2 * 3") == "7"

    def test_negative_result(self, session):
        assert session.eval_line("-(2 + 5) * 16") == "-112"

    def test_parse_error_is_reported(self, session):
        output = session.eval_line("(1 + 2")
        assert output.startswith("Parse failed: [1:7] expected `)`")
        assert output.rstrip().endswith("^")

    def test_literal_range_error(self, session):
        assert "too large" in session.eval_line("99999999999999999999")

    def test_evaluation_error(self, session):
        assert session.eval_line("1 / 0").startswith("Error: ")

    def test_history_records_lines(self, session):
        session.eval_line("1")
        session.eval_line(" 2 + 2 ")
        assert session.history == ["1", "2 + 2"]

    def test_session_config(self):
        session = REPLSession(ParserConfig(max_depth=1))
        assert "nesting depth" in session.eval_line("((1))")


# =============================================================================
# Command Tests
# =============================================================================


class TestREPLCommands:
    """Tests for ':' commands."""

    def test_help_lists_commands(self, session):
        output = session.eval_line(":help")
        for name in ("ast", "tree", "tokens", "sexpr", "quit"):
            assert f":{name}" in output

    def test_help_alias(self, session):
        assert session.eval_line(":?") == session.eval_line(":help")

    def test_ast(self, session):
        assert session.eval_line(":ast 1 + 2") == (
            "BinOp { lhs: Integer(1), op: Add, rhs: Integer(2) }"
        )

    def test_tree(self, session):
        output = session.eval_line(":tree 1 + 2")
        assert output.splitlines()[0] == "BinOp {"

    def test_sexpr(self, session):
        assert session.eval_line(":sexpr 1 - 2 + 3") == "(+ (- 1 2) 3)"

    def test_infix(self, session):
        assert session.eval_line(":infix 1 + 2 * 3") == "(1 + (2 * 3))"

    def test_tokens(self, session):
        output = session.eval_line(":tokens 1 + 2")
        assert output.splitlines() == ['integer "1" @0', "bin_op + @2", 'integer "2" @4']

    def test_tokens_error(self, session):
        assert session.eval_line(":tokens 1 +").startswith("Parse failed")

    def test_command_requires_expression(self, session):
        assert "requires an expression" in session.eval_line(":ast")

    def test_command_parse_error(self, session):
        assert session.eval_line(":ast 1 2").startswith("Parse failed")

    def test_history_and_clear(self, session):
        session.eval_line("1 + 1")
        assert "1 + 1" in session.eval_line(":history")
        session.eval_line(":clear")
        assert session.history == []

    def test_unknown_command(self, session):
        assert "Unknown command: :nope" in session.eval_line(":nope")

    def test_quit_raises(self, session):
        with pytest.raises(QuitREPL):
            session.eval_line(":quit")


# =============================================================================
# Main Loop Tests
# =============================================================================


class TestREPLRun:
    """Tests for the interactive loop."""

    @patch("calcparse.repl.HAS_READLINE", False)
    def test_run_until_quit(self, session, capsys):
        with patch("builtins.input", side_effect=["2 * 21", ":quit"]):
            session.run()
        out = capsys.readouterr().out
        assert "42" in out
        assert "Goodbye!" in out

    @patch("calcparse.repl.HAS_READLINE", False)
    def test_run_until_eof(self, session, capsys):
        with patch("builtins.input", side_effect=["1 +", EOFError]):
            session.run()
        out = capsys.readouterr().out
        assert "Parse failed" in out
        assert "Goodbye!" in out


class TestREPLLongInput:
    def test_long_chain(self, session):
        assert session.eval_line(" + ".join(["1"] * 10_000)) == "10000"

    def test_long_chain_sexpr(self, session):
        output = session.eval_line(":sexpr " + " * ".join(["1"] * 10_000))
        assert output.count("*") == 9_999
