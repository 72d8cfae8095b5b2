"""Command-line interface for rdcalc."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from rdcalc.errors import EvalError, ParseError
from rdcalc.tokens import LINE_BREAK

CONFIG_NAME = "rdcalc.toml"
OUTPUT_FORMATS = ("plain", "annotated")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    expressions: list[str]
    input_file: Path | None
    strict: bool
    output_format: str
    tokens: bool


@dataclass(frozen=True, slots=True)
class Expression:
    """One expression to evaluate, with where it came from."""

    source: str
    origin: str
    line: int = 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="rdcalc",
        description="Evaluate integer arithmetic expressions",
    )
    p.add_argument(
        "expr",
        nargs="*",
        help="Expression to evaluate (default: read lines from stdin)",
    )
    p.add_argument(
        "-f",
        "--file",
        metavar="FILE",
        help="Evaluate each non-blank line of FILE",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--permissive",
        action="store_true",
        help="Ignore trailing input after a complete expression",
    )
    p.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: plain)",
    )
    p.add_argument("--tokens", action="store_true", help="Dump tokens to stderr")
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.file) if args.file else None
    search_dir = Path(".")
    if input_file is not None and input_file.parent.parts:
        search_dir = input_file.parent

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)

    strict = True
    cfg_eval = config.get("evaluate")
    if isinstance(cfg_eval, dict):
        cfg_strict = cfg_eval.get("strict")
        if isinstance(cfg_strict, bool):
            strict = cfg_strict
    if args.permissive:
        strict = False

    output_format = "plain"
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in OUTPUT_FORMATS:
                raise argparse.ArgumentTypeError(
                    f"invalid output format in config: {cfg_format!r}"
                )
            output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    return CliOptions(
        expressions=list(args.expr),
        input_file=input_file,
        strict=strict,
        output_format=output_format,
        tokens=args.tokens,
    )


def split_lines(text: str, origin: str) -> list[Expression]:
    """Split text into expressions, skipping blank and '#' comment lines.

    Lines end at CRLF, LF or a lone CR, the same breaks the lexer counts. Form
    feed and vertical tab are whitespace inside an expression.
    """
    result: list[Expression] = []
    for lineno, line in enumerate(LINE_BREAK.split(text), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        result.append(Expression(line, origin, lineno))
    return result


def collect_expressions(options: CliOptions, stdin: TextIO) -> list[Expression]:
    """Gather expressions from the command line, the input file, or stdin."""
    exprs = [Expression(e, "<arg>") for e in options.expressions]
    if options.input_file is not None:
        text = options.input_file.read_text(encoding="utf-8")
        exprs.extend(split_lines(text, str(options.input_file)))
    if not exprs and options.input_file is None:
        exprs = split_lines(stdin.read(), "<stdin>")
    return exprs


def run(options: CliOptions, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    """Evaluate every expression, printing results; return the worst exit code."""
    from rdcalc.debug import dump_tokens
    from rdcalc.parser import evaluate

    code = 0
    for expr in collect_expressions(options, stdin):
        if options.tokens:
            dump_tokens(expr.source, file=stderr)
        try:
            value = evaluate(expr.source, strict=options.strict)
        except ParseError as exc:
            print(exc.format(expr.origin, first_line=expr.line), file=stderr)
            code = max(code, 1)
            continue
        except EvalError as exc:
            print(exc.format(expr.origin, first_line=expr.line), file=stderr)
            code = max(code, 2)
            continue

        if options.output_format == "annotated":
            print(f"{expr.source.strip()} = {value}", file=stdout)
        else:
            print(value, file=stdout)
    return code


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        return run(options, sys.stdin, sys.stdout, sys.stderr)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


def entry() -> None:
    """Console script wrapper around main()."""
    sys.exit(main())

