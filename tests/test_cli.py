"""Tests for the CLI module: arg parsing, exit codes, output, end-to-end."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from rdcalc.cli import (
    CliOptions,
    build_parser,
    collect_expressions,
    main,
    run,
    split_lines,
)


def _options(**overrides) -> CliOptions:
    values = dict(
        expressions=[],
        input_file=None,
        strict=True,
        output_format="plain",
        tokens=False,
    )
    values.update(overrides)
    return CliOptions(**values)


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_no_args(self) -> None:
        ns = build_parser().parse_args([])
        assert ns.expr == []
        assert ns.file is None
        assert ns.permissive is False

    def test_multiple_expressions(self) -> None:
        ns = build_parser().parse_args(["1 + 2", "3"])
        assert ns.expr == ["1 + 2", "3"]

    def test_file_and_flags(self) -> None:
        ns = build_parser().parse_args(["-f", "sums.txt", "--permissive", "--tokens"])
        assert ns.file == "sums.txt"
        assert ns.permissive is True
        assert ns.tokens is True

    def test_format_choice(self) -> None:
        ns = build_parser().parse_args(["--format", "annotated"])
        assert ns.format == "annotated"

    def test_bad_format_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--format", "json"])


# ---------------------------------------------------------------------------
# Expression collection
# ---------------------------------------------------------------------------


class TestSplitLines:
    def test_skips_blank_and_comments(self) -> None:
        exprs = split_lines("1 + 1\n\n# note\n  2 * 3\n", "f.txt")
        assert [(e.source, e.line) for e in exprs] == [("1 + 1", 1), ("  2 * 3", 4)]
        assert all(e.origin == "f.txt" for e in exprs)

    def test_form_feed_and_vertical_tab_stay_in_line(self) -> None:
        exprs = split_lines("1 +\f2\n3\v* 4\n", "f.txt")
        assert [(e.source, e.line) for e in exprs] == [("1 +\f2", 1), ("3\v* 4", 2)]

    def test_line_endings(self) -> None:
        exprs = split_lines("1\r\n2\r3\n", "f.txt")
        assert [(e.source, e.line) for e in exprs] == [("1", 1), ("2", 2), ("3", 3)]

    def test_stdin_used_when_nothing_given(self) -> None:
        exprs = collect_expressions(_options(), io.StringIO("4 / 2\n"))
        assert [e.source for e in exprs] == ["4 / 2"]
        assert exprs[0].origin == "<stdin>"

    def test_args_take_priority_over_stdin(self) -> None:
        exprs = collect_expressions(_options(expressions=["1"]), io.StringIO("2\n"))
        assert [e.source for e in exprs] == ["1"]


# ---------------------------------------------------------------------------
# run()
# ---------------------------------------------------------------------------


class TestRun:
    def test_plain_output(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        code = run(_options(expressions=["1 + 2", "2 * (3 + 4) * 5"]), io.StringIO(), out, err)
        assert code == 0
        assert out.getvalue() == "3\n70\n"
        assert err.getvalue() == ""

    def test_annotated_output(self) -> None:
        out = io.StringIO()
        options = _options(expressions=[" 1 - 2 - 3 "], output_format="annotated")
        run(options, io.StringIO(), out, io.StringIO())
        assert out.getvalue() == "1 - 2 - 3 = -4\n"

    def test_continues_after_error(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        code = run(_options(expressions=["(", "5"]), io.StringIO(), out, err)
        assert code == 1
        assert out.getvalue() == "5\n"
        assert "error: expected integer literal" in err.getvalue()

    def test_worst_code_wins(self) -> None:
        code = run(
            _options(expressions=["1 / 0", ")"]), io.StringIO(), io.StringIO(), io.StringIO()
        )
        assert code == 2

    def test_permissive(self) -> None:
        out = io.StringIO()
        options = _options(expressions=["1 + 2 )"], strict=False)
        code = run(options, io.StringIO(), out, io.StringIO())
        assert code == 0
        assert out.getvalue() == "3\n"

    def test_token_dump(self) -> None:
        err = io.StringIO()
        run(_options(expressions=["7"], tokens=True), io.StringIO(), io.StringIO(), err)
        assert "1:1 UINT: 7" in err.getvalue()

    def test_file_errors_report_file_line(self, tmp_path: Path) -> None:
        src = tmp_path / "sums.txt"
        src.write_text("1 + 1\n\n3 / 0\n")
        out, err = io.StringIO(), io.StringIO()
        code = run(_options(input_file=src), io.StringIO(), out, err)
        assert code == 2
        assert out.getvalue() == "2\n"
        assert f"--> {src}:3:3" in err.getvalue()


# ---------------------------------------------------------------------------
# Exit codes through main()
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, capsys) -> None:
        assert main(["2 * 3 + 4 * 5"]) == 0
        assert capsys.readouterr().out == "26\n"

    def test_syntax_error_returns_1(self, capsys) -> None:
        assert main(["1 +"]) == 1
        assert "error:" in capsys.readouterr().err

    def test_division_by_zero_returns_2(self, capsys) -> None:
        assert main(["4 / (2 - 2)"]) == 2
        assert "division by zero" in capsys.readouterr().err

    def test_missing_file_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main(["-f", str(tmp_path / "absent.txt")]) == 2
        assert "error:" in capsys.readouterr().err

    def test_form_feed_inside_file_expression(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "sums.txt"
        src.write_text("1 +\f2\n")
        assert main(["-f", str(src)]) == 0
        assert capsys.readouterr().out == "3\n"

    def test_undecodable_file_returns_2(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "latin1.txt"
        src.write_bytes(b"1 + \xff\n")
        assert main(["-f", str(src)]) == 2
        assert "error:" in capsys.readouterr().err

    def test_file_input(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "sums.txt"
        src.write_text("# totals\n1 + 2\n(1 + 2) + 3\n")
        assert main(["-f", str(src)]) == 0
        assert capsys.readouterr().out == "3\n6\n"
