"""
Analysis Session
================
One analysis run: its own character stream, position tracker, lexer,
scope manager and parser. Sessions share nothing, so any number of them
can run side by side in one process.

Usage:
    result = analyze("int x = 5; int y = x + 1;")
    if not result.ok:
        print(result.diagnostic)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, TextIO

from .config import AnalysisConfig
from .errors import AnalysisError
from .lexer import Lexer
from .parser import Parser
from .reporter import Diagnostic, Event, Reporter
from .stream import CharStream, PositionTracker
from .symbols import ScopeManager, Symbol

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Outcome of a session. ``symbols`` is the table as it stood at the end."""
    ok: bool
    error: AnalysisError | None = None
    diagnostic: Diagnostic | None = None
    symbols: list[Symbol] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "diagnostic": self.diagnostic.to_dict() if self.diagnostic else None,
            "symbols": [
                {"name": s.name, "declared_type": s.declared_type,
                 "scope_level": s.scope_level, "line": s.line, "column": s.column}
                for s in self.symbols
            ],
        }


class _DiagnosticsOnly(Reporter):
    """Drops trace events, forwards the terminal diagnostic."""

    def __init__(self, inner: Reporter):
        self.inner = inner

    def emit(self, event: Event) -> None:
        if isinstance(event, Diagnostic):
            self.inner.emit(event)


class AnalysisSession:
    """
    Wires stream → tracker → lexer → parser ↔ scope manager for one input.

    run() reports the first error through the reporter and returns a failed
    result; check() does the same and then re-raises the error.
    """

    def __init__(self, source: str | TextIO, config: AnalysisConfig | None = None,
                 reporter: Reporter | None = None):
        self.config = config or AnalysisConfig()
        reporter = reporter or Reporter()
        self.reporter = reporter if self.config.trace else _DiagnosticsOnly(reporter)
        self.tracker = PositionTracker()
        self.lexer = Lexer(CharStream(source), self.tracker,
                           max_lexeme_length=self.config.max_lexeme_length)
        self.scopes = ScopeManager(self.reporter, max_symbols=self.config.max_symbols)
        self.parser = Parser(self.lexer, self.scopes, self.reporter,
                             max_depth=self.config.max_depth)
        self.result: AnalysisResult | None = None

    def run(self) -> AnalysisResult:
        if self.result is not None:
            raise RuntimeError("An analysis session can only run once")
        logger.debug("analysis started (config=%s)", self.config.to_dict())
        try:
            self.parser.parse()
        except AnalysisError as exc:
            diagnostic = exc.to_diagnostic()
            self.reporter.emit(diagnostic)
            logger.info("analysis failed: %s", exc)
            self.result = AnalysisResult(False, exc, diagnostic, self.scopes.symbols)
            return self.result
        logger.debug("analysis succeeded with %d top-level symbol(s)", len(self.scopes))
        self.result = AnalysisResult(True, symbols=self.scopes.symbols)
        return self.result

    def check(self) -> AnalysisResult:
        result = self.run()
        if result.error is not None:
            raise result.error
        return result


def analyze(source: str | TextIO, config: AnalysisConfig | None = None,
            reporter: Reporter | None = None, **overrides: Any) -> AnalysisResult:
    """Run one session over ``source``. Keyword overrides patch ``config``."""
    config = config or AnalysisConfig()
    if overrides:
        config = config.merged(**overrides)
    return AnalysisSession(source, config, reporter).run()
