from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

import polars as pl

from mdxlsx.models.types import ColumnType


class WarningCode(str, Enum):
    """Categorization for column-scoped (non-fatal) problems."""

    COLUMN_NOT_FOUND = "column_not_found"
    UNSUPPORTED_TYPE = "unsupported_type"
    CONVERSION_FAILED = "conversion_failed"
    VALUES_SET_TO_MISSING = "values_set_to_missing"


@dataclass(frozen=True)
class CoercionWarning:
    column: str
    type_tag: str
    code: WarningCode
    message: str


@dataclass(frozen=True)
class ColumnOutcome:
    """Result of coercing one column.

    ``series`` is set when the conversion was applied. A successful outcome may
    still carry a warning (values that could not be parsed became missing).
    """

    column: str
    type_tag: str
    column_type: ColumnType | None = None
    series: pl.Series | None = None
    warning: CoercionWarning | None = None
    missing_introduced: int = 0

    @property
    def applied(self) -> bool:
        return self.series is not None


@dataclass(frozen=True)
class CoercionResult:
    table: pl.DataFrame
    warnings: tuple[CoercionWarning, ...] = ()
    outcomes: tuple[ColumnOutcome, ...] = ()


@dataclass(frozen=True)
class ConversionResult:
    """Outcome summary for one markdown -> xlsx conversion."""

    output_path: Path
    table: pl.DataFrame
    warnings: tuple[CoercionWarning, ...] = field(default_factory=tuple)
    started_at: datetime | None = None
    completed_at: datetime | None = None


__all__ = [
    "CoercionResult",
    "CoercionWarning",
    "ColumnOutcome",
    "ConversionResult",
    "WarningCode",
]
