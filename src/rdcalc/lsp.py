"""Minimal LSP server for rdcalc expression files — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from rdcalc import __version__
from rdcalc.cli import split_lines
from rdcalc.errors import CalcError, EvalError, ParseError
from rdcalc.parser import evaluate

server = LanguageServer(
    "rdcalc-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _diagnostic(exc: CalcError, line: int, severity: DiagnosticSeverity) -> Diagnostic:
    # Each expression is a single line, so its span is on line 1 of its own source
    start_col = exc.span.start.column - 1
    end_col = max(exc.span.end.column - 1, start_col + 1)
    return Diagnostic(
        range=Range(
            start=Position(line=line - 1, character=start_col),
            end=Position(line=line - 1, character=end_col),
        ),
        message=exc.message,
        severity=severity,
        source="rdcalc",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Evaluate every expression line and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    for expr in split_lines(doc.source, uri):
        try:
            evaluate(expr.source)
        except ParseError as exc:
            diagnostics.append(_diagnostic(exc, expr.line, DiagnosticSeverity.Error))
        except EvalError as exc:
            diagnostics.append(_diagnostic(exc, expr.line, DiagnosticSeverity.Warning))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
