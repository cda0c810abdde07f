from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook

from mdxlsx.infrastructure.io.workbook import create_output_workbook, resolve_output_path, save_workbook
from mdxlsx.models.errors import OutputError


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [
        ("report", "report.xlsx"),
        ("report.v2", "report.v2.xlsx"),
        ("report.xlsx", "report.xlsx"),
        ("REPORT.XLSX", "REPORT.XLSX"),
        (Path("out") / "life", str(Path("out") / "life.xlsx")),
    ],
)
def test_resolve_output_path(file_name, expected):
    assert resolve_output_path(file_name) == Path(expected)


def test_resolve_output_path_rejects_blank_name():
    with pytest.raises(OutputError):
        resolve_output_path("  ")


def test_create_output_workbook_has_single_named_sheet():
    wb = create_output_workbook("Life table")

    assert wb.sheetnames == ["Life table"]


def test_save_workbook_creates_parent_dirs(tmp_path):
    path = tmp_path / "a" / "b" / "out.xlsx"

    assert save_workbook(Workbook(), path) == path
    assert path.exists()


def test_save_workbook_wraps_os_errors(tmp_path):
    taken = tmp_path / "taken.xlsx"
    taken.mkdir()

    with pytest.raises(OutputError):
        save_workbook(Workbook(), taken)
