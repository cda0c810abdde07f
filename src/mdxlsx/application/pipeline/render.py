from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import polars as pl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, TYPE_STRING
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from mdxlsx.infrastructure.io.workbook import create_output_workbook, save_workbook
from mdxlsx.infrastructure.observability.logger import NullLogger, RunLogger


@dataclass
class SheetWriter:
    """Simple worksheet writer that tracks an explicit row cursor.

    openpyxl's ``Worksheet.append`` advances an internal cursor even when appending
    an empty row; ``max_row`` does not. Tracking our own cursor keeps output ranges
    accurate without relying on openpyxl internals.

    Text is always stored as text: values starting with ``=`` are not turned into
    formulas, and control characters Excel cannot store are removed (counted in
    ``sanitized_cells``).
    """

    worksheet: Worksheet
    row: int = 0  # last written row index (1-based); 0 means "nothing written yet"
    sanitized_cells: int = 0

    def _clean(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        cleaned = ILLEGAL_CHARACTERS_RE.sub("", value)
        if cleaned != value:
            self.sanitized_cells += 1
        return cleaned

    def write_row(self, values: Sequence[Any]) -> int:
        cleaned = [self._clean(v) for v in values]
        self.worksheet.append(cleaned)
        self.row += 1
        for col, value in enumerate(cleaned, start=1):
            if isinstance(value, str):
                self.worksheet.cell(row=self.row, column=col).data_type = TYPE_STRING
        return self.row


def render_table(*, table: pl.DataFrame, writer: SheetWriter) -> str:
    """Write the header row and every data row; return the A1 range written."""

    start_row = writer.row + 1

    headers = list(table.columns)
    writer.write_row(headers)

    for row in table.iter_rows(named=False):
        writer.write_row(row)

    col_count = len(headers)
    if col_count == 0:
        return ""
    end_row = start_row + table.height
    return f"A{start_row}:{get_column_letter(col_count)}{end_row}"


def write_workbook(
    table: pl.DataFrame,
    output_path: Path,
    *,
    sheet_name: str = "Sheet1",
    logger: RunLogger | None = None,
) -> Path:
    """Write ``table`` as the only sheet of a new workbook at ``output_path``."""

    logger = logger or NullLogger()

    workbook = create_output_workbook(sheet_name)
    writer = SheetWriter(workbook.active)
    output_range = render_table(table=table, writer=writer)
    if writer.sanitized_cells:
        logger.warning(
            "Removed characters that cannot be stored in a worksheet",
            extra={"data": {"cells": writer.sanitized_cells}},
        )
    save_workbook(workbook, output_path)

    logger.event(
        "workbook.written",
        message=f"Wrote {table.height} rows to sheet '{sheet_name}'",
        level=logging.INFO,
        data={
            "output_file": str(output_path),
            "sheet_name": sheet_name,
            "row_count": table.height,
            "column_count": table.width,
            "output_range": output_range,
        },
    )
    return output_path


__all__ = ["SheetWriter", "render_table", "write_workbook"]
