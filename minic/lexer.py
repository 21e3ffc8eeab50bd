"""
Mini-C Lexer
============
Converts a character stream into classified tokens, one token per pull.
The parser calls next_token() whenever it needs more input; nothing is
tokenized ahead of time.

Classes of tokens:
  KEYWORD     if else while for return int
  IDENTIFIER  letter { letter | digit }
  NUMBER      digit { digit }            (no sign, no fraction)
  OPERATOR    + - * / = < > ! & |  and  == != <= >= && ||
  DELIMITER   { } ( ) ; , :
  INVALID     any other single character
"""
from dataclasses import dataclass
from enum import Enum, auto
from string import ascii_letters, digits
from typing import Iterator, TextIO

from .errors import LexicalError
from .stream import EOF, CharStream, PositionTracker


class TokenKind(Enum):
    """All token kinds produced by the lexer."""
    KEYWORD     = auto()
    IDENTIFIER  = auto()
    NUMBER      = auto()
    OPERATOR    = auto()
    DELIMITER   = auto()
    EOF         = auto()
    INVALID     = auto()   # lexical error, surfaced to the parser


@dataclass
class Token:
    """A single token with the position of its first character."""
    kind: TokenKind
    lexeme: str
    line: int
    column: int

    def is_keyword(self, word: str) -> bool:
        return self.kind == TokenKind.KEYWORD and self.lexeme == word

    def is_operator(self, op: str) -> bool:
        return self.kind == TokenKind.OPERATOR and self.lexeme == op

    def is_delimiter(self, ch: str) -> bool:
        return self.kind == TokenKind.DELIMITER and self.lexeme == ch

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, L{self.line}:{self.column})"


KEYWORDS = frozenset({"if", "else", "while", "for", "return", "int"})

OPERATOR_CHARS = frozenset("+-*/=<>!&|")

# Operator pairs that lex as a single token
TWO_CHAR_OPERATORS = frozenset({"==", "!=", "<=", ">=", "&&", "||"})

DELIMITER_CHARS = frozenset("{}();,:")

WHITESPACE = frozenset(" \t\n\r\v\f")

LETTERS = frozenset(ascii_letters)
DIGITS = frozenset(digits)


class Lexer:
    """
    Pull-based tokenizer for Mini-C source.

    Usage:
        lexer = Lexer("int x = 1;")
        token = lexer.next_token()
        tokens = Lexer(source).tokenize()   # tooling only

    The tracker is advanced by exactly the characters each token consumes;
    the single character of lookahead past a word, number or operator is
    pushed back together with its position.
    """

    def __init__(self, source: str | TextIO | CharStream,
                 tracker: PositionTracker | None = None,
                 max_lexeme_length: int | None = None):
        self.stream = source if isinstance(source, CharStream) else CharStream(source)
        self.tracker = tracker or PositionTracker()
        self.max_lexeme_length = max_lexeme_length

    def _getch(self) -> str:
        ch = self.stream.read()
        self.tracker.advance(ch)
        return ch

    def _ungetch(self, ch: str) -> None:
        self.stream.unread(ch)
        self.tracker.pushback(ch)

    def _read_run(self, first: str, allowed: frozenset, line: int, column: int) -> str:
        """Consume the maximal run of ``allowed`` characters starting with ``first``."""
        chars = [first]
        ch = self._getch()
        while ch in allowed and ch != EOF:
            chars.append(ch)
            ch = self._getch()
        self._ungetch(ch)
        lexeme = "".join(chars)
        if self.max_lexeme_length is not None and len(lexeme) > self.max_lexeme_length:
            raise LexicalError(
                f"lexeme exceeds {self.max_lexeme_length} characters",
                line, column, lexeme,
            )
        return lexeme

    def next_token(self) -> Token:
        """Return the next token; EOF is returned repeatedly once input ends."""
        ch = self._getch()
        while ch in WHITESPACE and ch != EOF:
            ch = self._getch()

        line, column = self.tracker.position

        if ch == EOF:
            return Token(TokenKind.EOF, "", line, column)

        if ch in LETTERS:
            word = self._read_run(ch, LETTERS | DIGITS, line, column)
            kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
            return Token(kind, word, line, column)

        if ch in DIGITS:
            number = self._read_run(ch, DIGITS, line, column)
            return Token(TokenKind.NUMBER, number, line, column)

        if ch in OPERATOR_CHARS:
            following = self._getch()
            if ch + following in TWO_CHAR_OPERATORS:
                return Token(TokenKind.OPERATOR, ch + following, line, column)
            self._ungetch(following)
            return Token(TokenKind.OPERATOR, ch, line, column)

        if ch in DELIMITER_CHARS:
            return Token(TokenKind.DELIMITER, ch, line, column)

        return Token(TokenKind.INVALID, ch, line, column)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return

    def tokenize(self) -> list[Token]:
        """Tokenize the remaining input into a list ending with EOF."""
        return list(self)
