"""
Character Stream & Position Tracker
===================================
Sequential character pulls over program source with exactly one character
of pushback, plus the line/column bookkeeping the lexer stamps on tokens.

Columns count the characters consumed on the current line, so a token's
column is the 1-based column of its first character. A newline moves to the
next line at column 0.
"""
from __future__ import annotations

from typing import TextIO

EOF = ""


class CharStream:
    """
    Pull characters one at a time from a string or a text file object.

    Usage:
        stream = CharStream("int x;")
        ch = stream.read()      # "i"
        stream.unread(ch)       # the next read() returns "i" again
    """

    def __init__(self, source: str | TextIO):
        if isinstance(source, str):
            self._text = source
            self._file = None
        else:
            self._text = None
            self._file = source
        self._pos = 0
        self._pending: str | None = None

    def read(self) -> str:
        """Return the next character, or EOF ("") once the input is exhausted."""
        if self._pending is not None:
            ch, self._pending = self._pending, None
            return ch
        if self._file is not None:
            return self._file.read(1)
        if self._pos >= len(self._text):
            return EOF
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def unread(self, ch: str) -> None:
        if ch == EOF:
            return
        if self._pending is not None:
            raise RuntimeError("only one character of pushback is supported")
        self._pending = ch


class PositionTracker:
    """Current line/column over a character stream."""

    def __init__(self):
        self.line = 1
        self.column = 0
        self._previous: tuple[int, int] | None = None

    @property
    def position(self) -> tuple[int, int]:
        return self.line, self.column

    def advance(self, ch: str) -> None:
        if ch == EOF:
            return
        self._previous = (self.line, self.column)
        if ch == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1

    def pushback(self, ch: str) -> None:
        """Undo the most recent advance, restoring the exact prior position."""
        if ch == EOF:
            return
        if self._previous is None:
            raise RuntimeError("pushback without a preceding advance")
        self.line, self.column = self._previous
        self._previous = None
