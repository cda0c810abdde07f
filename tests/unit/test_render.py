from __future__ import annotations

from datetime import date

import openpyxl
import polars as pl
from openpyxl import Workbook

from mdxlsx.application.pipeline.render import SheetWriter, render_table, write_workbook


class DummyLogger:
    def __init__(self):
        self.events = []

    def event(self, *args, **kwargs):
        self.events.append({"args": args, "kwargs": kwargs})


def test_render_writes_header_then_rows():
    wb = Workbook()
    ws = wb.active
    table = pl.DataFrame({"name": ["Alice", "Bob"], "age": [30, None]})

    output_range = render_table(table=table, writer=SheetWriter(ws))

    assert output_range == "A1:B3"
    assert [c.value for c in ws[1]] == ["name", "age"]
    assert [c.value for c in ws[2]] == ["Alice", 30]
    assert ws["B3"].value is None


def test_render_continues_from_writer_cursor():
    wb = Workbook()
    writer = SheetWriter(wb.active)
    writer.write_row(["title"])

    output_range = render_table(table=pl.DataFrame({"a": [1]}), writer=writer)

    assert output_range == "A2:A3"
    assert writer.row == 3


def test_render_empty_table_returns_blank_range():
    wb = Workbook()

    assert render_table(table=pl.DataFrame(), writer=SheetWriter(wb.active)) == ""


def test_write_workbook_keeps_cell_types(tmp_path):
    logger = DummyLogger()
    table = pl.DataFrame(
        {
            "x": [1.5, 2.0],
            "n": [1, 2],
            "ok": [True, None],
            "day": [date(2024, 1, 31), None],
            "label": ["a", "b"],
        }
    )
    out_path = tmp_path / "nested" / "out.xlsx"

    written = write_workbook(table, out_path, sheet_name="Data", logger=logger)

    assert written == out_path
    wb = openpyxl.load_workbook(out_path)
    assert wb.sheetnames == ["Data"]
    ws = wb["Data"]
    assert [c.value for c in ws[1]] == ["x", "n", "ok", "day", "label"]
    assert ws["A2"].value == 1.5
    assert ws["B3"].value == 2
    assert ws["C2"].value is True
    assert ws["C3"].value is None
    assert ws["D2"].value.date() == date(2024, 1, 31)
    assert ws["E3"].value == "b"

    event = logger.events[0]
    assert event["args"][0] == "workbook.written"
    assert event["kwargs"]["data"]["output_range"] == "A1:E3"
    assert event["kwargs"]["data"]["row_count"] == 2


class WarningSpyLogger(DummyLogger):
    def __init__(self):
        super().__init__()
        self.warnings = []

    def warning(self, msg, *args, **kwargs):
        self.warnings.append((msg, kwargs))


def test_text_that_looks_like_a_formula_stays_text(tmp_path):
    table = pl.DataFrame({"expr": ["=1+1", "plain"], "n": [1, 2]})
    out_path = tmp_path / "out.xlsx"

    write_workbook(table, out_path, logger=DummyLogger())

    ws = openpyxl.load_workbook(out_path).active
    assert ws["A2"].data_type == "s"
    assert ws["A2"].value == "=1+1"
    assert ws["B2"].data_type == "n"


def test_illegal_control_characters_are_removed(tmp_path):
    logger = WarningSpyLogger()
    table = pl.DataFrame({"text": ["x\x07y", "ok"]})
    out_path = tmp_path / "out.xlsx"

    write_workbook(table, out_path, logger=logger)

    ws = openpyxl.load_workbook(out_path).active
    assert ws["A2"].value == "xy"
    assert ws["A3"].value == "ok"
    assert len(logger.warnings) == 1
    assert logger.warnings[0][1]["extra"]["data"] == {"cells": 1}
