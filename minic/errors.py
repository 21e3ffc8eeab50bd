"""
Analysis Errors
===============
Terminal conditions raised from anywhere inside the lexer, parser or
scope manager. The first one raised ends the analysis; the session turns it
into a single Diagnostic for the reporter.

Taxonomy:
  LexicalError         — character outside every token class, or lexeme too long
  ParseError           — token does not fit the grammar rule being matched
  RedeclarationError   — same name declared twice at one scope level
  UndeclaredUseError   — identifier not visible from the current scope
  CapacityError        — symbol table grew past its configured limit
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token
    from .reporter import Diagnostic


class AnalysisError(Exception):
    """Base class for every condition that aborts an analysis."""

    category = "analysis"

    def __init__(self, message: str, line: int = 0, column: int = 0,
                 near: str | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.near = near

    @classmethod
    def at(cls, token: Token, message: str) -> AnalysisError:
        """Build the error located at ``token`` (EOF tokens carry no lexeme)."""
        from .lexer import TokenKind

        near = None if token.kind == TokenKind.EOF else token.lexeme
        return cls(message, token.line, token.column, near)

    def to_diagnostic(self) -> Diagnostic:
        from .reporter import Diagnostic

        return Diagnostic(
            category=self.category,
            message=self.message,
            line=self.line,
            column=self.column,
            near=self.near,
            error=type(self).__name__,
        )

    def __str__(self) -> str:
        where = "<EOF>" if self.near is None else repr(self.near)
        return f"{self.message} near {where} (line {self.line}, column {self.column})"


class LexicalError(AnalysisError):
    category = "lexical"


class ParseError(AnalysisError):
    category = "syntax"


class SemanticError(AnalysisError):
    category = "semantic"


class RedeclarationError(SemanticError):
    pass


class UndeclaredUseError(SemanticError):
    pass


class CapacityError(AnalysisError):
    """Resource limit, not a defect in the analysed program."""
    category = "capacity"
