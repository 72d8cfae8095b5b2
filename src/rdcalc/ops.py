"""Binary operators and 32-bit two's-complement arithmetic."""

from __future__ import annotations

from enum import Enum

from rdcalc.errors import DivisionByZeroError
from rdcalc.tokens import Span

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class BinaryOp(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, ch: str) -> BinaryOp:
        """Return the operator spelled *ch*; raises ValueError otherwise."""
        return cls(ch)


def wrap_i32(n: int) -> int:
    """Reduce an arbitrary int to a signed 32-bit value, wrapping on overflow."""
    return ((n - INT32_MIN) & 0xFFFFFFFF) + INT32_MIN


def negate(n: int) -> int:
    """Unary minus; negating INT32_MIN yields INT32_MIN."""
    return wrap_i32(-n)


def apply(op: BinaryOp, left: int, right: int, span: Span, source: str) -> int:
    """Combine two operands; *span* locates the operator for error reporting."""
    if op is BinaryOp.ADD:
        return wrap_i32(left + right)
    if op is BinaryOp.SUB:
        return wrap_i32(left - right)
    if op is BinaryOp.MUL:
        return wrap_i32(left * right)
    if op is BinaryOp.DIV:
        if right == 0:
            raise DivisionByZeroError(span, source)
        # Python's // floors; C truncates toward zero
        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            quotient = -quotient
        return wrap_i32(quotient)
    raise AssertionError(f"unhandled operator {op!r}")
