"""Recursive descent integer calculator."""

from __future__ import annotations

from rdcalc.errors import CalcError, DivisionByZeroError, EvalError, ParseError
from rdcalc.parser import evaluate

__version__ = "0.1.0"

__all__ = [
    "CalcError",
    "DivisionByZeroError",
    "EvalError",
    "ParseError",
    "evaluate",
]
