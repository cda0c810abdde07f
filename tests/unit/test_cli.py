from __future__ import annotations

import logging
import tomllib
from pathlib import Path

import openpyxl
import pytest
from typer import BadParameter
from typer.testing import CliRunner

from mdxlsx.cli.app import app
from mdxlsx.cli.common import LogFormat, load_types_file, parse_type_options, resolve_logging
from mdxlsx.infrastructure.settings import Settings

ROOT = Path(__file__).resolve().parents[2]

runner = CliRunner()

TABLE = """\
| Age(x) | l_x    | q_x     |
|--------|--------|---------|
| 0      | 100000 | 0.00612 |
| 1      | 99388  | 0.00043 |
"""


def _write_table(tmp_path: Path) -> Path:
    path = tmp_path / "life.md"
    path.write_text(TABLE, encoding="utf-8")
    return path


def test_no_args_shows_help() -> None:
    result = runner.invoke(app, [])
    assert "Usage:" in result.output


def test_version_command_outputs_pyproject_version() -> None:
    expected_version = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]["version"]

    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == expected_version


def test_convert_writes_workbook(tmp_path) -> None:
    source = _write_table(tmp_path)

    result = runner.invoke(
        app,
        [
            "convert",
            "-i",
            str(source),
            "-o",
            str(tmp_path / "out"),
            "-t",
            "Age(x)=integer",
            "--type",
            "q_x=numeric",
            "--quiet",
        ],
    )

    assert result.exit_code == 0, result.output
    out_path = tmp_path / "out.xlsx"
    assert str(out_path) in result.output
    ws = openpyxl.load_workbook(out_path).active
    assert ws["A2"].value == 0
    assert ws["B2"].value == "100000"
    assert ws["C3"].value == pytest.approx(0.00043)


def test_convert_defaults_output_next_to_input(tmp_path) -> None:
    source = _write_table(tmp_path)

    result = runner.invoke(app, ["convert", "--input", str(source), "--quiet"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "life.xlsx").exists()


def test_convert_reads_types_file_and_sheet_name(tmp_path) -> None:
    source = _write_table(tmp_path)
    types_file = tmp_path / "types.toml"
    types_file.write_text('l_x = "integer"\n"Age(x)" = "character"\n', encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "convert",
            "-i",
            str(source),
            "-o",
            str(tmp_path / "out"),
            "--types-file",
            str(types_file),
            "--type",
            "Age(x)=integer",
            "--sheet-name",
            "Life",
            "--quiet",
        ],
    )

    assert result.exit_code == 0, result.output
    wb = openpyxl.load_workbook(tmp_path / "out.xlsx")
    assert wb.sheetnames == ["Life"]
    assert wb["Life"]["A2"].value == 0
    assert wb["Life"]["B3"].value == 99388


def test_convert_reports_column_warnings(tmp_path) -> None:
    source = _write_table(tmp_path)

    result = runner.invoke(
        app,
        ["convert", "-i", str(source), "-o", str(tmp_path / "out"), "-t", "nope=numeric"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.count("Column 'nope' not found") == 1


def test_convert_bad_type_option_is_usage_error(tmp_path) -> None:
    source = _write_table(tmp_path)

    result = runner.invoke(app, ["convert", "-i", str(source), "-t", "Age(x)"])

    assert result.exit_code == 2


def test_convert_missing_input_is_usage_error(tmp_path) -> None:
    result = runner.invoke(app, ["convert", "-i", str(tmp_path / "missing.md")])

    assert result.exit_code == 2


def test_convert_output_failure_exits_1(tmp_path) -> None:
    source = _write_table(tmp_path)
    (tmp_path / "taken.xlsx").mkdir()

    result = runner.invoke(app, ["convert", "-i", str(source), "-o", str(tmp_path / "taken"), "--quiet"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_convert_writes_log_file(tmp_path) -> None:
    source = _write_table(tmp_path)
    log_file = tmp_path / "run.ndjson"

    result = runner.invoke(
        app,
        [
            "convert",
            "-i",
            str(source),
            "-o",
            str(tmp_path / "out"),
            "--log-file",
            str(log_file),
            "--log-format",
            "ndjson",
            "--quiet",
        ],
    )

    assert result.exit_code == 0, result.output
    text = log_file.read_text(encoding="utf-8")
    assert "mdxlsx.conversion.completed" in text


def test_parse_type_options_splits_on_last_equals() -> None:
    assert parse_type_options(["a=b=numeric", " c = date "]) == {"a=b": "numeric", "c": "date"}


@pytest.mark.parametrize("values", [["novalue"], ["=numeric"], ["a="], ["a=numeric", "a=integer"]])
def test_parse_type_options_rejects_bad_values(values) -> None:
    with pytest.raises(BadParameter):
        parse_type_options(values)


def test_load_types_file_json(tmp_path) -> None:
    path = tmp_path / "types.json"
    path.write_text('{"a": "numeric", "b": "factor"}', encoding="utf-8")

    assert load_types_file(path) == {"a": "numeric", "b": "factor"}


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("types.json", "[1, 2]"),
        ("types.json", '{"a": 1}'),
        ("types.json", "{not json"),
        ("types.yaml", "a: numeric"),
    ],
)
def test_load_types_file_rejects_bad_files(tmp_path, name, content) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(BadParameter):
        load_types_file(path)


def test_resolve_logging_precedence() -> None:
    settings = Settings(log_level="info")

    assert resolve_logging(log_format=None, log_level="error", debug=False, quiet=False, settings=settings) == (
        "text",
        logging.ERROR,
    )
    assert resolve_logging(log_format=LogFormat.ndjson, log_level="error", debug=True, quiet=False, settings=settings) == (
        "ndjson",
        logging.DEBUG,
    )
    assert resolve_logging(log_format=None, log_level=None, debug=True, quiet=True, settings=settings)[1] == logging.WARNING
