# minic: Mini-C front end
"""
minic: lexer, recursive-descent parser and scope checker for a small
C-like language. Accepts or rejects a program, reporting the first
lexical, syntax or semantic error with its line and column.
"""
__version__ = "0.1.0"

from .errors import (
    AnalysisError, LexicalError, ParseError,
    SemanticError, RedeclarationError, UndeclaredUseError, CapacityError,
)
from .stream import CharStream, PositionTracker
from .lexer import Lexer, Token, TokenKind
from .symbols import Symbol, ScopeManager
from .reporter import (
    Reporter, RecordingReporter, ConsoleReporter, LoggingReporter, MultiReporter,
    TokenEvent, ScopeEvent, SymbolEvent, Diagnostic,
)
from .parser import Parser
from .config import AnalysisConfig, load_config
from .session import AnalysisSession, AnalysisResult, analyze

__all__ = [
    "AnalysisError", "LexicalError", "ParseError",
    "SemanticError", "RedeclarationError", "UndeclaredUseError", "CapacityError",
    "CharStream", "PositionTracker",
    "Lexer", "Token", "TokenKind",
    "Symbol", "ScopeManager",
    "Reporter", "RecordingReporter", "ConsoleReporter", "LoggingReporter", "MultiReporter",
    "TokenEvent", "ScopeEvent", "SymbolEvent", "Diagnostic",
    "Parser",
    "AnalysisConfig", "load_config",
    "AnalysisSession", "AnalysisResult", "analyze",
]
