"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    UINT = auto()  # decimal digit run, value is the decoded unsigned int
    NAME = auto()  # [A-Za-z_][A-Za-z0-9_]*
    CHAR = auto()  # any other single character, value is that character
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with decoded value and original source text."""

    type: TokenType
    value: int | str
    raw: str
    span: Span

    def is_char(self, ch: str) -> bool:
        """Return True if this is the single-character token *ch*."""
        return self.type == TokenType.CHAR and self.value == ch

    def describe(self) -> str:
        """Human-readable description used in diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.UINT:
            return f"integer literal {self.raw}"
        if self.type == TokenType.NAME:
            return f"name '{self.raw}'"
        return f"'{self.value}'"


# C isspace() set
_SPACE = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset("0123456789")
_IDENT_START = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_")
_IDENT_CHARS = _IDENT_START | _DIGITS

# Terminator sentinel; scanning never goes past it.
END_CHAR = "\0"

# Line breaks counted by the lexer: CRLF, LF, or a lone CR
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def is_space(ch: str) -> bool:
    return ch in _SPACE


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return ch in _DIGITS


def is_ident_start(ch: str) -> bool:
    """Return True if ch can begin a name (ASCII letter or underscore)."""
    return ch in _IDENT_START


def is_ident_char(ch: str) -> bool:
    """Return True if ch can continue a name."""
    return ch in _IDENT_CHARS
