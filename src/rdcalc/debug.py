"""--tokens dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from rdcalc.lexer import tokenize
from rdcalc.tokens import Token, TokenType


def dump_tokens(source: str, *, file: TextIO = sys.stderr) -> None:
    """Print one line per token of *source* to *file*."""
    for tok in tokenize(source):
        file.write(f"{tok.span.start.line}:{tok.span.start.column} {format_token(tok)}\n")


def format_token(tok: Token) -> str:
    if tok.type == TokenType.UINT:
        return f"UINT: {tok.value}"
    if tok.type == TokenType.NAME:
        return f"NAME: {tok.value}"
    if tok.type == TokenType.EOF:
        return "EOF"
    return f"CHAR: {tok.value!r}"
