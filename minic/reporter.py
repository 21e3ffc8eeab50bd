"""
Reporters
=========
Event sinks for an analysis. The core never prints: it hands structured
events to a Reporter, and the host decides how (or whether) to render them.

Events:
  TokenEvent   — every token the parser pulls (EOF carries no lexeme)
  ScopeEvent   — block scope entered / exited
  SymbolEvent  — variable declared / use validated
  Diagnostic   — the single terminal error of a failed analysis

Reporters:
  Reporter           — base class, every hook is a no-op
  RecordingReporter  — keeps every event (tests, HTTP API)
  ConsoleReporter    — trace to stdout, diagnostic to stderr
  LoggingReporter    — routes events through the logging module
  MultiReporter      — fan-out to several reporters
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, asdict
from typing import Any, TextIO, Union

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  Events
# ─────────────────────────────────────────────────────────────

@dataclass
class TokenEvent:
    """A token pulled by the parser."""
    kind: str
    lexeme: str | None
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {"event": "token", **asdict(self)}

    def __str__(self) -> str:
        if self.lexeme is None:
            return f"Token {self.kind:<10}             (line {self.line}, column {self.column})"
        return f"Token {self.kind:<10} '{self.lexeme}'   (line {self.line}, column {self.column})"


@dataclass
class ScopeEvent:
    """Block scope entered or exited. ``level`` is the level entered or left."""
    action: str               # "enter" | "exit"
    level: int
    removed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"event": "scope", **asdict(self)}

    def __str__(self) -> str:
        if self.action == "enter":
            return f"SEMANTIC: entered scope {self.level}"
        return f"SEMANTIC: leaving scope {self.level}, removing symbols."


@dataclass
class SymbolEvent:
    """A declaration recorded or an identifier use validated."""
    action: str               # "declare" | "use"
    name: str
    declared_type: str
    scope_level: int
    line: int = 0
    column: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"event": "symbol", **asdict(self)}

    def __str__(self) -> str:
        if self.action == "declare":
            return (f"SEMANTIC: declared variable '{self.name}' "
                    f"(type: {self.declared_type}, scope: {self.scope_level})")
        return f"SEMANTIC: use of variable '{self.name}' validated."


CATEGORY_LABELS = {
    "lexical": "Lexical error",
    "syntax": "Syntax error",
    "semantic": "Semantic error",
    "capacity": "Capacity error",
}


@dataclass
class Diagnostic:
    """The terminal error of a failed analysis. ``near`` is None at end of input."""
    category: str
    message: str
    line: int
    column: int
    near: str | None = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"event": "diagnostic", **asdict(self)}

    def __str__(self) -> str:
        label = CATEGORY_LABELS.get(self.category, "Error")
        where = "<EOF>" if self.near is None else f"'{self.near}'"
        return (f"✘ {label}: {self.message} near {where} "
                f"(line {self.line}, column {self.column})")


Event = Union[TokenEvent, ScopeEvent, SymbolEvent, Diagnostic]


# ─────────────────────────────────────────────────────────────
#  Reporters
# ─────────────────────────────────────────────────────────────

class Reporter:
    """
    Base reporter. Subclasses override the hooks they care about.

    Usage:
        class Counter(Reporter):
            def on_token(self, event):
                self.count += 1
    """

    def emit(self, event: Event) -> None:
        if isinstance(event, TokenEvent):
            self.on_token(event)
        elif isinstance(event, ScopeEvent):
            self.on_scope(event)
        elif isinstance(event, SymbolEvent):
            self.on_symbol(event)
        elif isinstance(event, Diagnostic):
            self.on_diagnostic(event)
        else:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

    def on_token(self, event: TokenEvent) -> None:
        pass

    def on_scope(self, event: ScopeEvent) -> None:
        pass

    def on_symbol(self, event: SymbolEvent) -> None:
        pass

    def on_diagnostic(self, event: Diagnostic) -> None:
        pass


class RecordingReporter(Reporter):
    """Keeps every event in arrival order."""

    def __init__(self):
        self.events: list[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    @property
    def tokens(self) -> list[TokenEvent]:
        return [e for e in self.events if isinstance(e, TokenEvent)]

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [e for e in self.events if isinstance(e, Diagnostic)]

    def of_type(self, event_type: type) -> list[Event]:
        return [e for e in self.events if isinstance(e, event_type)]

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.events]


class ConsoleReporter(Reporter):
    """Prints the trace to ``out`` and the diagnostic to ``err``."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None,
                 trace: bool = True):
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.trace = trace

    def _trace(self, event: Event) -> None:
        if self.trace:
            print(event, file=self.out)

    def on_token(self, event: TokenEvent) -> None:
        self._trace(event)

    def on_scope(self, event: ScopeEvent) -> None:
        self._trace(event)

    def on_symbol(self, event: SymbolEvent) -> None:
        self._trace(event)

    def on_diagnostic(self, event: Diagnostic) -> None:
        print(f"\n{event}", file=self.err)


class LoggingReporter(Reporter):
    """Trace events at DEBUG, the diagnostic at ERROR."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def on_token(self, event: TokenEvent) -> None:
        self.log.debug("%s", event)

    def on_scope(self, event: ScopeEvent) -> None:
        self.log.debug("%s", event)

    def on_symbol(self, event: SymbolEvent) -> None:
        self.log.debug("%s", event)

    def on_diagnostic(self, event: Diagnostic) -> None:
        self.log.error("%s", event)


class MultiReporter(Reporter):
    """Forwards every event to each wrapped reporter in order."""

    def __init__(self, *reporters: Reporter):
        self.reporters = list(reporters)

    def emit(self, event: Event) -> None:
        for reporter in self.reporters:
            reporter.emit(event)
