"""
minic CLI — Command-Line Interface for the Mini-C front end
==========================================================

Usage:
    # Validate a program, printing the token/semantic trace
    minic check program.c
    minic check program.c --quiet --max-symbols 100

    # Read the program from stdin
    cat program.c | minic check -

    # Show the token stream only
    minic tokens program.c

    # Interactive checker
    minic repl

    # HTTP API
    minic serve --port 8000

Exit codes: 0 program accepted, 1 program rejected, 2 usage error.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from . import __version__
from .config import AnalysisConfig, load_config
from .lexer import Lexer, TokenKind
from .reporter import ConsoleReporter
from .session import AnalysisSession

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_USAGE = 2


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def build_config(args) -> AnalysisConfig:
    """Config file (if any) with command-line overrides on top."""
    config = load_config(args.config) if getattr(args, "config", None) else AnalysisConfig()
    return config.merged(
        max_symbols=getattr(args, "max_symbols", None),
        max_depth=getattr(args, "max_depth", None),
        max_lexeme_length=getattr(args, "max_lexeme", None),
        trace=False if getattr(args, "quiet", False) else None,
    )


def _read_source(path: str, err: TextIO) -> str | None:
    """Whole text of ``path`` (``-`` is stdin), or None after reporting why not."""
    try:
        if path == "-":
            return sys.stdin.read()
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        print(f"✘ File not found: {path}", file=err)
    except (OSError, UnicodeDecodeError) as e:
        print(f"✘ Cannot read {path}: {e}", file=err)
    return None


def run_file(path: str, config: AnalysisConfig | None = None,
             out: TextIO | None = None, err: TextIO | None = None) -> int:
    """
    Analyse one source file with console output.

    Returns:
        EXIT_OK if the program is accepted, EXIT_REJECTED on the first
        error, EXIT_USAGE if the file cannot be read.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    config = config or AnalysisConfig()

    source = _read_source(path, err)
    if source is None:
        return EXIT_USAGE

    print("--- Starting lexical, syntax and semantic analysis ---\n", file=out)
    reporter = ConsoleReporter(out=out, err=err)
    result = AnalysisSession(source, config, reporter).run()

    if not result.ok:
        return EXIT_REJECTED
    print("\n--- Analysis completed successfully! ---", file=out)
    return EXIT_OK


# ─────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────

def cmd_check(args) -> int:
    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"✘ Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE
    return run_file(args.file, config)


def cmd_tokens(args) -> int:
    """Print every token without parsing."""
    source = _read_source(args.file, sys.stderr)
    if source is None:
        return EXIT_USAGE
    for token in Lexer(source):
        lexeme = "" if token.kind == TokenKind.EOF else f"'{token.lexeme}'"
        print(f"{token.line:>4}:{token.column:<4} {token.kind.name:<10} {lexeme}")
    return EXIT_OK


def cmd_repl(args) -> int:
    from .repl import run_repl
    run_repl()
    return EXIT_OK


def cmd_serve(args) -> int:
    """Launch the HTTP API."""
    try:
        import uvicorn  # noqa: F401
    except ImportError:
        print("✘ uvicorn is required for the HTTP API.", file=sys.stderr)
        print("  Install it with:  pip install uvicorn fastapi", file=sys.stderr)
        return EXIT_USAGE

    from .server import run_server
    run_server(host=args.host, port=args.port)
    return EXIT_OK


# ─────────────────────────────────────────────────────────────
#  Main
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minic",
        description="minic — lexer, parser and scope checker for a small C-like language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  minic check program.c\n"
            "  minic check program.c --quiet --max-symbols 100\n"
            "  minic tokens program.c\n"
            "  minic repl\n"
            "  minic serve --port 8000\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # check
    p_check = subparsers.add_parser("check", help="Validate a program")
    p_check.add_argument("file", help="Source file, or - for stdin")
    p_check.add_argument("--quiet", "-q", action="store_true",
                         help="Only print the diagnostic, no trace")
    p_check.add_argument("--config", "-c", default=None, help="JSON config file")
    p_check.add_argument("--max-symbols", type=int, default=None,
                         help="Fail once more symbols than this are live")
    p_check.add_argument("--max-depth", type=int, default=None,
                         help="Maximum statement/expression nesting depth")
    p_check.add_argument("--max-lexeme", type=int, default=None,
                         help="Maximum identifier/number length")

    # tokens
    p_tokens = subparsers.add_parser("tokens", help="Print the token stream")
    p_tokens.add_argument("file", help="Source file, or - for stdin")

    # repl
    subparsers.add_parser("repl", help="Interactive checker")

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    p_serve.add_argument("--port", default=8000, type=int, help="Port number (default: 8000)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "check": cmd_check,
        "tokens": cmd_tokens,
        "repl": cmd_repl,
        "serve": cmd_serve,
    }

    if args.command in commands:
        return commands[args.command](args)
    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
