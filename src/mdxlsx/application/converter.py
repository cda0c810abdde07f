from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from mdxlsx.application.pipeline.coerce import coerce_columns, validate_type_spec
from mdxlsx.application.pipeline.parse import read_markdown_table
from mdxlsx.application.pipeline.render import write_workbook
from mdxlsx.infrastructure.io.workbook import resolve_output_path
from mdxlsx.infrastructure.observability.context import run_logger
from mdxlsx.infrastructure.observability.logger import RunLogger
from mdxlsx.infrastructure.settings import Settings
from mdxlsx.models.errors import InputError
from mdxlsx.models.results import ConversionResult
from mdxlsx.models.run import ConversionRequest
from mdxlsx.models.types import ColumnType, type_tag_text


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _duration_ms(started_at: datetime, completed_at: datetime) -> int:
    return max(0, int((completed_at - started_at).total_seconds() * 1000))


def _resolve_input(markdown_file: Any) -> Path:
    if not isinstance(markdown_file, (str, os.PathLike)):
        raise InputError(f"markdown_file must be a path (got {type(markdown_file).__name__})")
    return Path(markdown_file).expanduser().resolve()


class Converter:
    """Orchestrates one markdown -> xlsx conversion: parse, coerce, write."""

    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def _settings_snapshot(self) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of the current settings."""

        raw = self.settings.model_dump(mode="python", exclude_none=True)
        return {k: list(v) if isinstance(v, tuple) else v for k, v in raw.items()}

    # ------------------------------------------------------------------
    def run(self, request: ConversionRequest, *, logger: RunLogger | None = None) -> ConversionResult:
        if logger is not None:
            return self._execute(request, logger)

        with run_logger(
            log_format=self.settings.log_format,
            log_level=self.settings.log_level,
            log_file=request.log_file,
        ) as run_log:
            return self._execute(request, run_log)

    def _execute(self, request: ConversionRequest, logger: RunLogger) -> ConversionResult:
        started_at = _utc_now()
        input_label = str(request.markdown_file)
        output_path: Path | None = None

        logger.event(
            "settings.effective",
            message="Effective settings",
            level=logging.DEBUG,
            data={"settings": self._settings_snapshot()},
        )

        try:
            input_path = _resolve_input(request.markdown_file)
            input_label = str(input_path)
            col_types = validate_type_spec(request.col_types)
            output_path = resolve_output_path(request.file_name)

            logger.event(
                "conversion.started",
                message=f"Converting: {input_path}",
                data={
                    "input_file": input_label,
                    "output_file": str(output_path),
                    "column_types": {name: type_tag_text(tag) for name, tag in col_types.items()},
                },
            )

            raw_table = read_markdown_table(input_path, settings=self.settings, logger=logger)
            coerced = coerce_columns(raw_table, col_types, settings=self.settings, logger=logger)
            write_workbook(coerced.table, output_path, sheet_name=self.settings.sheet_name, logger=logger)
        except Exception as exc:
            completed_at = _utc_now()
            logger.event(
                "conversion.completed",
                message="Conversion failed",
                level=logging.ERROR,
                data={
                    "status": "failed",
                    "input_file": input_label,
                    "output_file": None,
                    "duration_ms": _duration_ms(started_at, completed_at),
                    "error": str(exc),
                },
            )
            raise

        completed_at = _utc_now()
        logger.event(
            "conversion.completed",
            message=f"Your file has been written to: {output_path}",
            data={
                "status": "succeeded",
                "input_file": input_label,
                "output_file": str(output_path),
                "row_count": coerced.table.height,
                "warning_count": len(coerced.warnings),
                "duration_ms": _duration_ms(started_at, completed_at),
            },
        )

        return ConversionResult(
            output_path=output_path,
            table=coerced.table,
            warnings=coerced.warnings,
            started_at=started_at,
            completed_at=completed_at,
        )


def convert_markdown(
    markdown_file: str | os.PathLike[str],
    col_types: Mapping[str, str | ColumnType] | None,
    file_name: str | os.PathLike[str],
    *,
    settings: Settings | None = None,
    log_file: Path | None = None,
) -> ConversionResult:
    """Convert a markdown table file to ``<file_name>.xlsx``.

    Columns named in ``col_types`` are coerced to the given types; problems
    with individual columns are reported in ``ConversionResult.warnings``.
    """

    request = ConversionRequest(
        markdown_file=markdown_file,  # type: ignore[arg-type]
        file_name=file_name,  # type: ignore[arg-type]
        col_types=col_types if col_types is not None else {},
        log_file=log_file,
    )
    return Converter(settings=settings).run(request)


__all__ = ["Converter", "convert_markdown"]
