"""
minic REPL
==========
Interactive checker. Every accepted line is appended to a program buffer
and the whole buffer is re-analysed, so declarations persist between
entries. A line that fails is dropped; a line that runs into end of input
(an open block, a dangling operator) is held until more input completes it.
"""
from __future__ import annotations

from typing import Callable

from .config import AnalysisConfig
from .session import AnalysisResult, analyze


BANNER = r"""
╔══════════════════════════════════════════════════════════════╗
║     minic — Mini-C front end                                 ║
║     Type statements; each is checked against everything      ║
║     accepted so far. Type 'help' for commands.               ║
╚══════════════════════════════════════════════════════════════╝
"""

HELP_TEXT = """
Commands:
  help      this text
  show      print the accepted program
  symbols   list top-level variables
  clear     forget the program and any pending input
  exit      leave (also: quit, Ctrl+D)

An empty line discards pending (incomplete) input.
"""


class ProgramBuffer:
    """Accepted source lines plus the incomplete input waiting to be finished."""

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = (config or AnalysisConfig()).merged(trace=False)
        self.lines: list[str] = []
        self.pending: list[str] = []
        self.last_result: AnalysisResult | None = None

    @property
    def source(self) -> str:
        return "\n".join(self.lines)

    def feed(self, line: str) -> AnalysisResult:
        """Check ``line`` against the accepted program; keep it if it passes."""
        candidate = self.pending + [line]
        result = analyze("\n".join(self.lines + candidate), self.config)
        if result.ok:
            self.lines.extend(candidate)
            self.pending = []
            self.last_result = result
        elif self._incomplete(result):
            self.pending = candidate
        else:
            self.pending = []
        return result

    @staticmethod
    def _incomplete(result: AnalysisResult) -> bool:
        diag = result.diagnostic
        return diag is not None and diag.category == "syntax" and diag.near is None

    def clear(self) -> None:
        self.lines = []
        self.pending = []
        self.last_result = None


def run_repl(read: Callable[[str], str] = input, write: Callable[[str], None] = print):
    """Run the interactive checker until exit or end of input."""
    write(BANNER)
    buffer = ProgramBuffer()

    while True:
        try:
            line = read("  ... " if buffer.pending else "  minic> ")
        except (EOFError, KeyboardInterrupt):
            write("\n  Goodbye.")
            break

        command = line.strip().lower()
        if not command:
            if buffer.pending:
                buffer.pending = []
                write("  ∅ Pending input discarded.")
            continue

        if not buffer.pending:
            if command in ("exit", "quit"):
                write("  Goodbye.")
                break
            if command == "help":
                write(HELP_TEXT)
                continue
            if command == "show":
                write(buffer.source or "  (empty program)")
                continue
            if command == "symbols":
                symbols = buffer.last_result.symbols if buffer.last_result else []
                if symbols:
                    write("  ─── Symbols ───")
                    for sym in symbols:
                        write(f"    {sym.declared_type} {sym.name}  (line {sym.line})")
                else:
                    write("  (no symbols)")
                continue
            if command == "clear":
                buffer.clear()
                write("  ∅ Program cleared.")
                continue

        result = buffer.feed(line)
        if result.ok:
            write("  ✔ ok")
        elif not buffer.pending:
            write(f"  {result.diagnostic}")
