"""Workbook IO helpers for :class:`~mdxlsx.application.converter.Converter`."""

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook

from mdxlsx.models.errors import OutputError

XLSX_SUFFIX = ".xlsx"


def resolve_output_path(file_name: Path | str) -> Path:
    """Map an output base name to ``<file_name>.xlsx``.

    The suffix is appended rather than substituted (``report.v2`` becomes
    ``report.v2.xlsx``); a name that already ends in ``.xlsx`` is kept.
    """

    text = str(file_name).strip()
    if not text:
        raise OutputError("Output file name must not be empty")

    path = Path(text).expanduser()
    if path.name.lower().endswith(XLSX_SUFFIX):
        return path
    return path.with_name(f"{path.name}{XLSX_SUFFIX}")


def create_output_workbook(sheet_name: str) -> Workbook:
    """Create a workbook holding a single, empty sheet named ``sheet_name``."""

    workbook = Workbook()
    worksheet = workbook.active
    if worksheet is None:
        worksheet = workbook.create_sheet()
    worksheet.title = sheet_name
    return workbook


def save_workbook(workbook: Workbook, path: Path) -> Path:
    """Save ``workbook`` to ``path``, creating parent directories as needed."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(path)
    except OSError as exc:
        raise OutputError(f"Failed to write workbook {path}: {exc}") from exc
    return path


__all__ = [
    "XLSX_SUFFIX",
    "create_output_workbook",
    "resolve_output_path",
    "save_workbook",
]
