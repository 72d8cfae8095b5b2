"""Expression lexer — scans source text one token at a time, on demand."""

from __future__ import annotations

from rdcalc.tokens import (
    END_CHAR,
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_ident_char,
    is_ident_start,
    is_space,
)

_UINT_MASK = 0xFFFFFFFF


class Lexer:
    """Produce tokens from source text into a single lookahead slot.

    The cursor only moves forward. Every character maps to some token, so
    scanning never fails: anything that is not whitespace, a digit or a name
    character becomes a one-character CHAR token.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self._token: Token | None = None

    @property
    def token(self) -> Token:
        """The current lookahead token."""
        if self._token is None:
            raise RuntimeError("lexer has not been advanced yet")
        return self._token

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self) -> str:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _at_end(self) -> bool:
        ch = self._peek()
        return ch == "" or ch == END_CHAR

    def _advance_char(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        # \r\n, lone \r and \n each end one line
        if ch == "\n" or (ch == "\r" and self._peek() != "\n"):
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, value: int | str, start: Position) -> None:
        end = self._current_pos()
        raw = self._source[start.offset : end.offset]
        self._token = Token(tt, value, raw, Span(start, end))

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def advance(self) -> None:
        """Scan the next token into the lookahead slot."""
        while is_space(self._peek()):
            self._advance_char()

        start = self._current_pos()

        if self._at_end():
            self._emit(TokenType.EOF, "", start)
            return

        ch = self._peek()

        if is_digit(ch):
            self._lex_uint(start)
            return

        if is_ident_start(ch):
            self._lex_name(start)
            return

        self._advance_char()
        self._emit(TokenType.CHAR, ch, start)

    def _lex_uint(self, start: Position) -> None:
        value = 0
        while is_digit(self._peek()):
            value = (value * 10 + int(self._advance_char())) & _UINT_MASK
        self._emit(TokenType.UINT, value, start)

    def _lex_name(self, start: Position) -> None:
        while is_ident_char(self._peek()):
            self._advance_char()
        self._emit(TokenType.NAME, self._source[start.offset : self._pos], start)


def tokenize(source: str) -> list[Token]:
    """Convenience function: scan source text up to and including EOF."""
    lexer = Lexer(source)
    tokens: list[Token] = []
    while True:
        lexer.advance()
        tokens.append(lexer.token)
        if lexer.token.type == TokenType.EOF:
            return tokens
