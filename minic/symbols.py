"""
Scope Manager / Symbol Table
============================
Declared variables kept in one list in declaration order, each tagged with
the scope level it was declared at.

Lookup scans backwards from the most recent declaration and returns the
first symbol whose level is not deeper than the current one. Leaving a
block drops the trailing run of symbols at the block's level; this relies
on the parser entering and leaving scopes in strict LIFO order.
"""
from __future__ import annotations

from dataclasses import dataclass

from .errors import CapacityError, RedeclarationError, UndeclaredUseError
from .lexer import Token
from .reporter import Reporter, ScopeEvent, SymbolEvent


@dataclass
class Symbol:
    """A declared variable."""
    name: str
    declared_type: str
    scope_level: int
    line: int = 0
    column: int = 0


class ScopeManager:
    """
    Scope-aware symbol table.

    Usage:
        scopes = ScopeManager()
        scopes.declare("x", "int")
        scopes.enter_scope()
        scopes.declare("x", "int")      # shadows the outer x
        scopes.exit_scope()             # outer x visible again
    """

    def __init__(self, reporter: Reporter | None = None,
                 max_symbols: int | None = None):
        self.reporter = reporter or Reporter()
        self.max_symbols = max_symbols
        self.level = 0
        self._symbols: list[Symbol] = []

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def symbols(self) -> list[Symbol]:
        return list(self._symbols)

    def enter_scope(self) -> None:
        self.level += 1
        self.reporter.emit(ScopeEvent("enter", self.level))

    def exit_scope(self) -> list[Symbol]:
        """Leave the current block, returning the symbols it declared."""
        if self.level == 0:
            raise RuntimeError("Cannot exit the top-level scope")
        cut = len(self._symbols)
        while cut > 0 and self._symbols[cut - 1].scope_level == self.level:
            cut -= 1
        removed = self._symbols[cut:]
        del self._symbols[cut:]
        self.reporter.emit(ScopeEvent("exit", self.level, [s.name for s in removed]))
        self.level -= 1
        return removed

    def declare(self, name: str, declared_type: str = "int",
                token: Token | None = None) -> Symbol:
        line, column = (token.line, token.column) if token else (0, 0)
        for sym in self._symbols:
            if sym.name == name and sym.scope_level == self.level:
                raise RedeclarationError(
                    f"redeclaration of variable '{name}'", line, column, name,
                )
        if self.max_symbols is not None and len(self._symbols) >= self.max_symbols:
            raise CapacityError(
                f"symbol table full ({self.max_symbols} symbols)", line, column, name,
            )
        sym = Symbol(name, declared_type, self.level, line, column)
        self._symbols.append(sym)
        self.reporter.emit(SymbolEvent(
            "declare", name, declared_type, self.level, line, column,
        ))
        return sym

    def lookup(self, name: str) -> Symbol | None:
        for sym in reversed(self._symbols):
            if sym.name == name and sym.scope_level <= self.level:
                return sym
        return None

    def require_declared(self, name: str, token: Token | None = None) -> Symbol:
        line, column = (token.line, token.column) if token else (0, 0)
        sym = self.lookup(name)
        if sym is None:
            raise UndeclaredUseError(
                f"variable '{name}' not declared", line, column, name,
            )
        self.reporter.emit(SymbolEvent(
            "use", name, sym.declared_type, sym.scope_level, line, column,
        ))
        return sym

    def visible(self) -> list[Symbol]:
        """Symbols reachable by name from the current level, innermost first."""
        seen: set[str] = set()
        result = []
        for sym in reversed(self._symbols):
            if sym.scope_level <= self.level and sym.name not in seen:
                seen.add(sym.name)
                result.append(sym)
        return result
