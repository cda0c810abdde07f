"""Convert command for the mdxlsx CLI."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from typer import BadParameter

from mdxlsx.application.converter import Converter
from mdxlsx.infrastructure.settings import Settings
from mdxlsx.models.errors import MdxlsxError
from mdxlsx.models.run import ConversionRequest

from .common import (
    DEBUG_OPTION,
    LOG_FORMAT_OPTION,
    LOG_LEVEL_OPTION,
    QUIET_OPTION,
    LogFormat,
    load_types_file,
    parse_type_options,
    resolve_logging,
)


def convert_command(
    input_file: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Markdown file containing a pipe table.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        resolve_path=False,
        help="Output file name; `.xlsx` is appended when missing. Defaults to <input_parent>/<input_stem>.xlsx.",
    ),
    types: List[str] = typer.Option(
        [],
        "--type",
        "-t",
        help="Column type as NAME=TYPE (numeric, integer, character, logical, date, factor). Repeatable.",
    ),
    types_file: Optional[Path] = typer.Option(
        None,
        "--types-file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="TOML or JSON file mapping column names to types. --type entries take precedence.",
    ),
    sheet_name: Optional[str] = typer.Option(
        None,
        "--sheet-name",
        help="Worksheet title (default: Sheet1).",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        dir_okay=False,
        resolve_path=True,
        help="Also write the run log to this file.",
    ),
    log_format: Optional[LogFormat] = LOG_FORMAT_OPTION,
    log_level: Optional[str] = LOG_LEVEL_OPTION,
    debug: bool = DEBUG_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """Convert a markdown table to an Excel workbook."""

    overrides = {"sheet_name": sheet_name} if sheet_name is not None else {}
    try:
        settings = Settings.load(**overrides)
    except ValidationError as exc:
        raise BadParameter(str(exc)) from exc

    effective_format, effective_level = resolve_logging(
        log_format=log_format,
        log_level=log_level,
        debug=debug,
        quiet=quiet,
        settings=settings,
    )
    settings = settings.model_copy(update={"log_format": effective_format, "log_level": effective_level})

    col_types: dict[str, str] = {}
    if types_file is not None:
        col_types.update(load_types_file(types_file))
    col_types.update(parse_type_options(types))

    request = ConversionRequest(
        markdown_file=input_file,
        file_name=output if output is not None else input_file.with_suffix(""),
        col_types=col_types,
        log_file=log_file,
    )

    try:
        result = Converter(settings=settings).run(request)
    except MdxlsxError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(str(result.output_path))


__all__ = ["convert_command"]
