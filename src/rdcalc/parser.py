"""Recursive descent parser that evaluates arithmetic while it parses.

Grammar, lowest precedence first::

    expr    = add_sub
    add_sub = mul_div { ("+" | "-") mul_div }
    mul_div = unary { ("*" | "/") unary }
    unary   = ["-"] primary
    primary = UINT | "(" expr ")"

No syntax tree is built; each rule returns the value of what it matched.
"""

from __future__ import annotations

from collections.abc import Callable

from rdcalc import ops
from rdcalc.errors import ParseError
from rdcalc.lexer import Lexer
from rdcalc.ops import BinaryOp
from rdcalc.tokens import Token, TokenType

_MUL_DIV: frozenset[str] = frozenset({BinaryOp.MUL.symbol, BinaryOp.DIV.symbol})
_ADD_SUB: frozenset[str] = frozenset({BinaryOp.ADD.symbol, BinaryOp.SUB.symbol})

# Each parenthesised group costs several Python frames
MAX_DEPTH = 64


class Parser:
    """Evaluate one expression from source text.

    All cursor and lookahead state lives on the instance, so independent
    parsers can run side by side.
    """

    def __init__(self, source: str, *, strict: bool = True) -> None:
        self._source = source
        self._strict = strict
        self._lexer = Lexer(source)
        self._depth = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        return self._lexer.token

    def _at(self, tt: TokenType) -> bool:
        return self._peek().type == tt

    def _at_char(self, ch: str) -> bool:
        return self._peek().is_char(ch)

    def _at_any(self, chars: frozenset[str]) -> bool:
        return any(self._at_char(ch) for ch in chars)

    def _advance(self) -> Token:
        tok = self._peek()
        self._lexer.advance()
        return tok

    def _match(self, ch: str) -> bool:
        if self._at_char(ch):
            self._advance()
            return True
        return False

    def _expect(self, ch: str, expected: str) -> Token:
        if not self._at_char(ch):
            raise self._error(expected)
        return self._advance()

    def _error(self, expected: str) -> ParseError:
        return ParseError(expected, self._peek(), self._source)

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    def parse(self) -> int:
        """Prime the lookahead, evaluate one expression, return its value."""
        self._lexer.advance()
        value = self.parse_expr()
        if self._strict and not self._at(TokenType.EOF):
            raise self._error("end of input")
        return value

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def parse_expr(self) -> int:
        return self._parse_add_sub()

    def _parse_primary(self) -> int:
        if self._at(TokenType.UINT):
            tok = self._advance()
            return ops.wrap_i32(tok.value)
        if self._at_char("("):
            if self._depth >= MAX_DEPTH:
                raise ParseError(
                    f"at most {MAX_DEPTH} nested groups",
                    self._peek(),
                    self._source,
                    f"nesting depth limit ({MAX_DEPTH}) exceeded",
                )
            self._advance()
            self._depth += 1
            value = self.parse_expr()
            self._expect(")", "')'")
            self._depth -= 1
            return value
        raise self._error("integer literal or '('")

    def _parse_unary(self) -> int:
        if self._match("-"):
            return ops.negate(self._parse_primary())
        return self._parse_primary()

    def _parse_binary(self, parse_operand: Callable[[], int], operators: frozenset[str]) -> int:
        """Left fold: operand { op operand } over operators of one precedence tier."""
        value = parse_operand()
        while self._at_any(operators):
            op_tok = self._advance()
            rhs = parse_operand()
            op = BinaryOp.from_char(op_tok.value)
            value = ops.apply(op, value, rhs, op_tok.span, self._source)
        return value

    def _parse_mul_div(self) -> int:
        return self._parse_binary(self._parse_unary, _MUL_DIV)

    def _parse_add_sub(self) -> int:
        return self._parse_binary(self._parse_mul_div, _ADD_SUB)


def evaluate(source: str, *, strict: bool = True) -> int:
    """Convenience function: evaluate an arithmetic expression to a 32-bit int.

    Raises ParseError on malformed input and DivisionByZeroError on ``x / 0``.
    With ``strict=False``, anything after a complete expression is ignored.
    """
    return Parser(source, strict=strict).parse()
