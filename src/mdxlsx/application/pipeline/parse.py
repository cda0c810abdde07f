from __future__ import annotations

import logging
import re
from pathlib import Path

import polars as pl

from mdxlsx.infrastructure.io.markdown import read_markdown_text
from mdxlsx.infrastructure.observability.logger import NullLogger, RunLogger
from mdxlsx.infrastructure.settings import Settings

_CELL_DELIMITER = "|"
_BLANK_HEADER = "NA"
_ALIGNMENT_ROW = re.compile(r"^[\s|:\-]+$")


def _split_cells(line: str) -> list[str]:
    return [cell.strip() for cell in line.split(_CELL_DELIMITER)]


def _content_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


def _blank_header_name(ordinal: int) -> str:
    """Name given to the n-th blank header cell: ``NA``, ``NA.1``, ``NA.2``, ..."""

    return _BLANK_HEADER if ordinal == 0 else f"{_BLANK_HEADER}.{ordinal}"


def _dedupe_headers(headers: list[str]) -> tuple[list[str], dict[int, str]]:
    """Make header names unique in source order by suffixing ``__2``, ``__3``, ...

    Returns the unique names and ``{position: new_name}`` for renamed headers.
    """

    used: set[str] = set(headers)
    seen: set[str] = set()
    out: list[str] = []
    renamed: dict[int, str] = {}
    for pos, name in enumerate(headers):
        if name not in seen:
            seen.add(name)
            out.append(name)
            continue

        count = 2
        candidate = f"{name}__{count}"
        while candidate in used:
            count += 1
            candidate = f"{name}__{count}"
        used.add(candidate)
        seen.add(candidate)
        out.append(candidate)
        renamed[pos] = candidate
    return out, renamed


def _cell(row: list[str], index: int) -> str | None:
    if index >= len(row):
        return None
    return row[index] or None


def parse_markdown_table(
    text: str,
    *,
    settings: Settings | None = None,
    logger: RunLogger | None = None,
) -> pl.DataFrame:
    """Parse a pipe-delimited markdown table into an all-text DataFrame.

    The first content line is the header and the second one (the alignment
    row) is always discarded. Columns whose header is blank or fully matches
    ``settings.placeholder_header_pattern`` are dropped.
    """

    settings = settings or Settings()
    logger = logger or NullLogger()
    placeholder = re.compile(settings.placeholder_header_pattern)

    lines = _content_lines(text)
    header = _split_cells(lines[0]) if lines else []
    if len(lines) > 1 and not _ALIGNMENT_ROW.match(lines[1]):
        logger.debug(
            "Second line is not a markdown alignment row; discarding it anyway",
            extra={"data": {"line": lines[1]}},
        )
    rows = [_split_cells(line) for line in lines[2:]]

    width = max([len(header), *(len(row) for row in rows)])
    header = header + [""] * (width - len(header))

    keep: list[int] = []
    dropped: list[str] = []
    blanks = 0
    for index, name in enumerate(header):
        if not name:
            dropped.append(_blank_header_name(blanks))
            blanks += 1
        elif placeholder.fullmatch(name):
            dropped.append(name)
        else:
            keep.append(index)

    names, renamed = _dedupe_headers([header[i] for i in keep])
    renamed_columns = {new: header[keep[pos]] for pos, new in renamed.items()}
    if renamed:
        logger.warning(
            "Duplicate column names made unique",
            extra={"data": {"renamed": renamed_columns}},
        )

    table = pl.DataFrame(
        [pl.Series(name, [_cell(row, index) for row in rows], dtype=pl.Utf8) for name, index in zip(names, keep)]
    )

    logger.event(
        "table.parsed",
        message=f"Parsed table with {table.width} columns and {table.height} rows",
        level=logging.INFO,
        data={
            "row_count": table.height,
            "column_count": table.width,
            "columns": list(table.columns),
            "dropped_columns": dropped,
            "renamed_columns": renamed_columns,
        },
    )
    return table


def read_markdown_table(
    path: Path,
    *,
    settings: Settings | None = None,
    logger: RunLogger | None = None,
) -> pl.DataFrame:
    """Read ``path`` and parse it with :func:`parse_markdown_table`."""

    settings = settings or Settings()
    text = read_markdown_text(path, encoding=settings.input_encoding)
    return parse_markdown_table(text, settings=settings, logger=logger)


__all__ = ["parse_markdown_table", "read_markdown_table"]
