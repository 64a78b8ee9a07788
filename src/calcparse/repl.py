"""
calcparse Interactive REPL (Read-Eval-Print Loop).

Reads one expression per line, parses it and prints its value. Commands
starting with ``:`` inspect the parse instead of evaluating it.

Usage:
    calcparse repl

Example session:
    >>> 1 + 2 * 3
    7

    >>> :ast -(2 + 5) * 16
    BinOp { lhs: Negate(BinOp { lhs: Integer(2), op: Add, rhs: Integer(5) }), op: Multiply, rhs: Integer(16) }

    >>> :sexpr 1 - 2 + 3
    (+ (- 1 2) 3)
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

try:
    import readline

    HAS_READLINE = True
except ImportError:
    # readline not available on some platforms (e.g., Windows without pyreadline)
    HAS_READLINE = False

from calcparse import __version__
from calcparse.syntax.evaluator import evaluate
from calcparse.syntax.grammar import Grammar
from calcparse.syntax.parser import Parser, ParserConfig
from calcparse.syntax.printer import format_tokens, to_debug, to_infix, to_sexpr
from calcparse.utils.errors import CalcParseError, EvaluationError, ParseError

logger = logging.getLogger(__name__)

HISTORY_FILE = Path.home() / ".calcparse_history"


# =============================================================================
# ANSI Color Codes
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors."""
        for attr in ["RED", "GREEN", "YELLOW", "CYAN", "BOLD", "DIM", "RESET"]:
            setattr(cls, attr, "")


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


# =============================================================================
# REPL Commands
# =============================================================================


@dataclass
class REPLCommand:
    """A REPL command definition."""

    name: str
    aliases: tuple[str, ...] = ()
    help_text: str = ""
    handler: Optional[Callable[[str], str]] = None


class QuitREPL(Exception):
    """Raised by ``:quit`` to leave the main loop."""


# =============================================================================
# REPL Session
# =============================================================================


class REPLSession:
    """
    Interactive REPL session for calcparse.

    Holds the parser configuration and the input history. ``eval_line`` is
    the whole per-line contract: it never raises for bad input and returns
    the text to print, or None when there is nothing to show.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.parser = Parser(self.config)
        self.history: list[str] = []
        self.prompt = ">>> "
        self._commands = self._setup_commands()

    def _setup_commands(self) -> dict[str, REPLCommand]:
        """Setup REPL commands."""
        commands = [
            REPLCommand("help", ("h", "?"), "Show this help message", self._cmd_help),
            REPLCommand("quit", ("q", "exit"), "Exit the REPL", self._cmd_quit),
            REPLCommand("ast", (), "Show the AST of an expression", self._cmd_ast),
            REPLCommand("tree", (), "Show the AST, one field per line", self._cmd_tree),
            REPLCommand("tokens", (), "Show the grammar match tree", self._cmd_tokens),
            REPLCommand("sexpr", (), "Show the AST as an S-expression", self._cmd_sexpr),
            REPLCommand("infix", (), "Show the fully parenthesized expression", self._cmd_infix),
            REPLCommand("history", (), "Show input history", self._cmd_history),
            REPLCommand("clear", (), "Clear input history", self._cmd_clear),
        ]

        # Build alias lookup
        alias_map = {}
        for cmd in commands:
            alias_map[cmd.name] = cmd
            for alias in cmd.aliases:
                alias_map[alias] = cmd

        return alias_map

    # -------------------------------------------------------------------------
    # Command Handlers
    # -------------------------------------------------------------------------

    def _cmd_help(self, args: str) -> str:
        lines = [f"{Colors.BOLD}Commands:{Colors.RESET}"]
        seen: set[str] = set()
        for cmd in self._commands.values():
            if cmd.name in seen:
                continue
            seen.add(cmd.name)
            lines.append(f"  {Colors.CYAN}:{cmd.name:<10}{Colors.RESET} {cmd.help_text}")
        lines += [
            "",
            f"{Colors.BOLD}Syntax:{Colors.RESET}",
            "  integers, + - * / %, parentheses, unary minus",
            f"  {Colors.GREEN}-(2 + 5) * 16{Colors.RESET}",
        ]
        return "\n".join(lines)

    def _cmd_quit(self, args: str) -> str:
        raise QuitREPL()

    def _with_expression(self, args: str, command: str, render: Callable) -> str:
        if not args.strip():
            return f"{Colors.RED}Error: :{command} requires an expression{Colors.RESET}"
        result = self.parser.try_parse(args.strip())
        if not result.ok:
            return self._format_error(result.error)
        return render(result.expr)

    def _cmd_ast(self, args: str) -> str:
        return self._with_expression(args, "ast", to_debug)

    def _cmd_tree(self, args: str) -> str:
        return self._with_expression(args, "tree", lambda expr: to_debug(expr, pretty=True))

    def _cmd_sexpr(self, args: str) -> str:
        return self._with_expression(args, "sexpr", to_sexpr)

    def _cmd_infix(self, args: str) -> str:
        return self._with_expression(args, "infix", to_infix)

    def _cmd_tokens(self, args: str) -> str:
        if not args.strip():
            return f"{Colors.RED}Error: :tokens requires an expression{Colors.RESET}"
        grammar = Grammar(
            max_depth=self.config.max_depth, operators=self.config.table.operators
        )
        try:
            return format_tokens(grammar.match(args.strip()))
        except ParseError as e:
            return self._format_error(e)

    def _cmd_history(self, args: str) -> str:
        if not self.history:
            return f"{Colors.DIM}No history{Colors.RESET}"
        return "\n".join(f"  {i:>3}  {line}" for i, line in enumerate(self.history, 1))

    def _cmd_clear(self, args: str) -> str:
        self.history.clear()
        return f"{Colors.GREEN}History cleared{Colors.RESET}"

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def _format_error(self, error: CalcParseError) -> str:
        kind = "Parse failed" if isinstance(error, ParseError) else "Error"
        return f"{Colors.RED}{kind}: {error}{Colors.RESET}"

    def eval_line(self, line: str) -> Optional[str]:
        """
        Evaluate a single line of input.

        Returns the result string or None if no output.
        """
        line = line.strip()
        if not line:
            return None

        self.history.append(line)

        if line.startswith(":"):
            return self._handle_command(line)

        result = self.parser.try_parse(line)
        if not result.ok:
            return self._format_error(result.error)

        try:
            return str(evaluate(result.expr))
        except EvaluationError as e:
            return self._format_error(e)

    def _handle_command(self, cmd: str) -> str:
        """Handle a REPL command."""
        parts = cmd[1:].split(maxsplit=1)
        command_name = parts[0].lower() if parts else ""
        args = parts[1] if len(parts) > 1 else ""

        if command_name in self._commands:
            return self._commands[command_name].handler(args)

        return (
            f"{Colors.RED}Unknown command: :{command_name}{Colors.RESET}\n"
            f"Type {Colors.CYAN}:help{Colors.RESET} for available commands"
        )

    # -------------------------------------------------------------------------
    # Main Loop
    # -------------------------------------------------------------------------

    def run(self) -> None:
        """Main REPL loop."""
        print(f"{Colors.BOLD}calcparse {__version__}{Colors.RESET} - Interactive Mode")
        print(
            f"Type {Colors.CYAN}:help{Colors.RESET} for help, {Colors.CYAN}:quit{Colors.RESET} to exit"
        )
        print()

        if HAS_READLINE:
            try:
                if HISTORY_FILE.exists():
                    readline.read_history_file(str(HISTORY_FILE))
            except OSError as e:
                logger.debug("could not read history file: %s", e)

        try:
            while True:
                try:
                    line = input(self.prompt)
                    result = self.eval_line(line)
                    if result:
                        print(result)
                except QuitREPL:
                    print(f"{Colors.DIM}Goodbye!{Colors.RESET}")
                    break
                except KeyboardInterrupt:
                    print(f"\n{Colors.DIM}Use :quit to exit{Colors.RESET}")
                except EOFError:
                    print(f"\n{Colors.DIM}Goodbye!{Colors.RESET}")
                    break
        finally:
            if HAS_READLINE:
                try:
                    readline.set_history_length(1000)
                    readline.write_history_file(str(HISTORY_FILE))
                except OSError as e:
                    logger.debug("could not write history file: %s", e)
