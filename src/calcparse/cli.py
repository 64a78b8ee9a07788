"""
calcparse Command-Line Interface.

Reads arithmetic expressions one per line and reports their parse trees
or values.

Usage:
    calcparse                         # parse lines from stdin
    calcparse parse exprs.txt         # parse each line of a file
    calcparse parse --format sexpr    # choose the tree rendering
    calcparse eval exprs.txt          # evaluate each line
    calcparse tokens "-(2 + 5) * 16"  # show the grammar match tree
    calcparse repl                    # interactive mode
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Iterator, Optional

from calcparse import __version__
from calcparse.syntax.evaluator import evaluate
from calcparse.syntax.grammar import DEFAULT_MAX_DEPTH, Grammar
from calcparse.syntax.parser import Parser, ParserConfig
from calcparse.syntax.printer import format_tokens, to_debug, to_infix, to_sexpr
from calcparse.utils.errors import CalcParseError, EvaluationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.CYAN = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    # Disable colors if not a TTY or if NO_COLOR is set
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


# Initialize on module load
_init_colors()


RENDERERS = {
    "debug": to_debug,
    "pretty": lambda expr: to_debug(expr, pretty=True),
    "infix": to_infix,
    "sexpr": to_sexpr,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="calcparse",
        description="calcparse - parse integer arithmetic by precedence climbing",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum nesting of parentheses and unary minus (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser(
        "parse",
        aliases=["p"],
        help="Parse one expression per line and print the tree",
    )
    parse_parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="File with one expression per line (default: stdin)",
    )
    parse_parser.add_argument(
        "-f",
        "--format",
        choices=sorted(RENDERERS),
        default="debug",
        help="Tree rendering (default: debug, one line per expression; "
        "pretty gives the multi-line dump)",
    )

    # Eval command
    eval_parser = subparsers.add_parser(
        "eval",
        aliases=["e"],
        help="Evaluate one expression per line",
    )
    eval_parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="File with one expression per line (default: stdin)",
    )

    # Tokens command
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Show the grammar match tree for an expression (debug)",
    )
    tokens_parser.add_argument(
        "expression",
        help="Expression to match",
    )

    # REPL command
    subparsers.add_parser(
        "repl",
        aliases=["i"],
        help="Start interactive mode",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _config_from_args(args: argparse.Namespace) -> ParserConfig:
    return ParserConfig(max_depth=args.max_depth)


def _read_lines(input_path: Optional[Path]) -> Iterator[tuple[int, str]]:
    """
    Yield ``(line_number, text)`` for every non-blank input line.

    Input is decoded as UTF-8 with undecodable bytes replaced, so a bad
    byte fails to match on its own line instead of aborting the run.
    """
    lines: Iterable[str]
    if input_path is None or str(input_path) == "-":
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is None:
            lines = sys.stdin
        else:
            lines = (raw.decode("utf-8", errors="replace") for raw in buffer)
    else:
        lines = input_path.read_text(encoding="utf-8", errors="replace").splitlines()

    for number, line in enumerate(lines, 1):
        text = line.rstrip("\r\n")
        if text.strip():
            yield number, text


def _prefix(input_path: Optional[Path], number: int) -> str:
    if input_path is None or str(input_path) == "-":
        return ""
    return f"{input_path}:{number}: "


def _report_failure(prefix: str, label: str, error: CalcParseError) -> None:
    print(f"{Colors.RED}{prefix}{label}: {error}{Colors.RESET}", file=sys.stderr)


def _check_input(input_path: Optional[Path]) -> bool:
    if input_path is not None and str(input_path) != "-" and not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return False
    return True


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse command: print ``Parsed: <tree>`` per line."""
    input_path: Optional[Path] = getattr(args, "input", None)
    render = RENDERERS[getattr(args, "format", "debug")]

    if not _check_input(input_path):
        return 1

    parser = Parser(_config_from_args(args))
    failures = 0
    for number, line in _read_lines(input_path):
        result = parser.try_parse(line)
        if result.ok:
            print(f"Parsed: {render(result.expr)}")
        else:
            failures += 1
            _report_failure(_prefix(input_path, number), "Parse failed", result.error)

    logger.debug("parse finished with %d failure(s)", failures)
    return 1 if failures else 0


def cmd_eval(args: argparse.Namespace) -> int:
    """Handle the eval command: print ``<expr> = <value>`` per line."""
    input_path: Optional[Path] = args.input

    if not _check_input(input_path):
        return 1

    parser = Parser(_config_from_args(args))
    failures = 0
    for number, line in _read_lines(input_path):
        result = parser.try_parse(line)
        if not result.ok:
            failures += 1
            _report_failure(_prefix(input_path, number), "Parse failed", result.error)
            continue
        try:
            value = evaluate(result.expr)
        except EvaluationError as e:
            failures += 1
            _report_failure(_prefix(input_path, number), "Evaluation failed", e)
            continue
        print(f"{line.strip()} = {value}")

    return 1 if failures else 0


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens command (debug)."""
    config = _config_from_args(args)
    grammar = Grammar(max_depth=config.max_depth, operators=config.table.operators)
    try:
        print(format_tokens(grammar.match(args.expression)))
        return 0
    except CalcParseError as e:
        _report_failure("", "Parse failed", e)
        return 1


def cmd_repl(args: argparse.Namespace) -> int:
    """Handle the repl command."""
    from calcparse.repl import REPLSession

    session = REPLSession(_config_from_args(args))
    session.run()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    if args.no_color:
        Colors.disable()

    if args.max_depth < 1:
        parser.error("--max-depth must be at least 1")

    # Without a command, behave like the classic stdin parse loop
    if args.command is None:
        return cmd_parse(args)

    command_handlers = {
        "parse": cmd_parse,
        "p": cmd_parse,
        "eval": cmd_eval,
        "e": cmd_eval,
        "tokens": cmd_tokens,
        "repl": cmd_repl,
        "i": cmd_repl,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
