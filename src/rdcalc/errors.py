"""Error types with formatted source context."""

from __future__ import annotations

from rdcalc.tokens import LINE_BREAK, Span, Token


class CalcError(Exception):
    """Base class for errors raised while evaluating an expression."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<expr>", first_line: int = 1) -> str:
        """Render the error with a source snippet.

        *first_line* is the line number the source text starts at in *filename*,
        for expressions taken from the middle of a file.
        """
        lines = LINE_BREAK.split(self.source)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx]
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line + first_line - 1)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{line_num}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class ParseError(CalcError):
    """Raised on the first unexpected token, with what was expected and found."""

    def __init__(
        self, expected: str, found: Token, source: str, message: str | None = None
    ) -> None:
        self.expected = expected
        self.found = found
        if message is None:
            message = f"expected {expected}, found {found.describe()}"
        super().__init__(message, found.span, source)


class EvalError(CalcError):
    """Raised on arithmetic errors."""


class DivisionByZeroError(EvalError):
    """Raised when the right operand of '/' evaluates to zero."""

    def __init__(self, span: Span, source: str) -> None:
        super().__init__("division by zero", span, source)
