from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import polars as pl

from mdxlsx.infrastructure.observability.logger import NullLogger, RunLogger
from mdxlsx.infrastructure.settings import Settings
from mdxlsx.models.errors import InputError, TypeSpecError
from mdxlsx.models.results import CoercionResult, CoercionWarning, ColumnOutcome, WarningCode
from mdxlsx.models.types import ColumnType, type_tag_text

# Everything except digits, the decimal point and the minus sign.
_NON_NUMERIC = r"[^0-9.\-]"

_TRUE_TOKENS = ["TRUE", "True", "true", "T"]
_FALSE_TOKENS = ["FALSE", "False", "false", "F"]

ColumnConverter = Callable[[str, pl.Series, Settings], pl.Expr]


def _as_text(name: str) -> pl.Expr:
    return pl.col(name).cast(pl.Utf8)


def _to_numeric(name: str, _series: pl.Series, _settings: Settings) -> pl.Expr:
    return _as_text(name).str.replace_all(_NON_NUMERIC, "").cast(pl.Float64, strict=False)


def _to_integer(name: str, _series: pl.Series, _settings: Settings) -> pl.Expr:
    digits = _as_text(name).str.replace_all(_NON_NUMERIC, "")
    # Whole numbers parse directly (no float round-trip); "42.9" falls back to truncation.
    return pl.coalesce(
        digits.cast(pl.Int64, strict=False),
        digits.cast(pl.Float64, strict=False).cast(pl.Int64, strict=False),
    )


def _to_character(name: str, _series: pl.Series, _settings: Settings) -> pl.Expr:
    return _as_text(name)


def _to_logical(name: str, _series: pl.Series, _settings: Settings) -> pl.Expr:
    text = _as_text(name)
    return (
        pl.when(text.is_in(_TRUE_TOKENS))
        .then(pl.lit(True))
        .when(text.is_in(_FALSE_TOKENS))
        .then(pl.lit(False))
        .otherwise(pl.lit(None, dtype=pl.Boolean))
    )


def _to_date(name: str, _series: pl.Series, settings: Settings) -> pl.Expr:
    text = _as_text(name)
    parsed = [text.str.to_date(format=fmt, strict=False) for fmt in settings.date_formats]
    return parsed[0] if len(parsed) == 1 else pl.coalesce(parsed)


def _to_factor(name: str, series: pl.Series, _settings: Settings) -> pl.Expr:
    levels = series.cast(pl.Utf8).drop_nulls().unique(maintain_order=True).to_list()
    if not levels:
        return _as_text(name).cast(pl.Categorical)
    return _as_text(name).cast(pl.Enum(levels))


_CONVERTERS: dict[ColumnType, ColumnConverter] = {
    ColumnType.NUMERIC: _to_numeric,
    ColumnType.INTEGER: _to_integer,
    ColumnType.CHARACTER: _to_character,
    ColumnType.LOGICAL: _to_logical,
    ColumnType.DATE: _to_date,
    ColumnType.FACTOR: _to_factor,
}


def validate_type_spec(col_types: Any) -> dict[str, str | ColumnType]:
    """Check that ``col_types`` maps column names to type tags.

    ``None`` means "no coercions". Unknown tag values and names that match no
    column (including ``""``) are allowed here; they become warnings during
    coercion.
    """

    if col_types is None:
        return {}
    if not isinstance(col_types, Mapping):
        raise TypeSpecError(
            f"col_types must be a mapping of column names to type names (got {type(col_types).__name__})"
        )

    mapping: dict[str, str | ColumnType] = {}
    for name, tag in col_types.items():
        if not isinstance(name, str):
            raise TypeSpecError(f"col_types keys must be column names (got {name!r})")
        if not isinstance(tag, str):
            raise TypeSpecError(f"Type for column '{name}' must be a type name (got {type(tag).__name__})")
        mapping[name] = tag
    return mapping


def coerce_column(
    table: pl.DataFrame,
    column: str,
    tag: str | ColumnType,
    *,
    settings: Settings,
) -> ColumnOutcome:
    """Convert one column of ``table`` without touching the table itself."""

    type_tag = type_tag_text(tag)

    if column not in table.columns:
        return ColumnOutcome(
            column=column,
            type_tag=type_tag,
            warning=CoercionWarning(
                column=column,
                type_tag=type_tag,
                code=WarningCode.COLUMN_NOT_FOUND,
                message=f"Column '{column}' not found in the table; skipping conversion.",
            ),
        )

    column_type = ColumnType.resolve(tag)
    if column_type is None:
        return ColumnOutcome(
            column=column,
            type_tag=type_tag,
            warning=CoercionWarning(
                column=column,
                type_tag=type_tag,
                code=WarningCode.UNSUPPORTED_TYPE,
                message=f"Unsupported target type '{type_tag}' for column '{column}'; skipping conversion.",
            ),
        )

    original = table.get_column(column)
    try:
        expr = _CONVERTERS[column_type](column, original, settings)
        converted = table.select(expr.alias(column)).to_series()
    except Exception as exc:
        return ColumnOutcome(
            column=column,
            type_tag=type_tag,
            warning=CoercionWarning(
                column=column,
                type_tag=type_tag,
                code=WarningCode.CONVERSION_FAILED,
                message=(
                    f"Error converting column '{column}' to type '{type_tag}': {exc}. "
                    "Column type remains unchanged."
                ),
            ),
        )

    missing = int((converted.is_null() & original.is_not_null()).sum())
    warning = None
    if missing:
        warning = CoercionWarning(
            column=column,
            type_tag=type_tag,
            code=WarningCode.VALUES_SET_TO_MISSING,
            message=(
                f"{missing} value(s) in column '{column}' could not be parsed as "
                f"{column_type.value} and were set to missing."
            ),
        )

    return ColumnOutcome(
        column=column,
        type_tag=type_tag,
        column_type=column_type,
        series=converted,
        warning=warning,
        missing_introduced=missing,
    )


def coerce_columns(
    table: pl.DataFrame,
    col_types: Mapping[str, str | ColumnType] | None,
    *,
    settings: Settings | None = None,
    logger: RunLogger | None = None,
) -> CoercionResult:
    """Coerce the columns named in ``col_types``, in mapping order.

    Problems with a single column are returned as warnings and never abort the
    call; the returned table is a new DataFrame.
    """

    if not isinstance(table, pl.DataFrame):
        raise InputError(f"table must be a polars DataFrame (got {type(table).__name__})")
    mapping = validate_type_spec(col_types)

    settings = settings or Settings()
    logger = logger or NullLogger()
    debug = logger.isEnabledFor(logging.DEBUG)

    working = table
    outcomes: list[ColumnOutcome] = []
    for column, tag in mapping.items():
        outcome = coerce_column(working, column, tag, settings=settings)
        outcomes.append(outcome)

        if outcome.applied and outcome.column_type is not None:
            before_sample = working.get_column(column).head(3).to_list() if debug else None
            working = working.with_columns(outcome.series)
            logger.event(
                "column.coerced",
                message=f"Converted column '{column}' to {outcome.column_type.value}",
                level=logging.DEBUG,
                data={
                    "column": column,
                    "column_type": outcome.column_type.value,
                    "row_count": working.height,
                    "missing_introduced": outcome.missing_introduced,
                    "sample_before": before_sample,
                    "sample_after": outcome.series.head(3).to_list() if debug else None,
                },
            )

        if outcome.warning is not None:
            logger.event(
                "column.warning",
                message=outcome.warning.message,
                level=logging.WARNING,
                data={
                    "column": column,
                    "type_tag": outcome.type_tag,
                    "code": outcome.warning.code.value,
                },
            )

    warnings = tuple(o.warning for o in outcomes if o.warning is not None)
    return CoercionResult(table=working, warnings=warnings, outcomes=tuple(outcomes))


__all__ = ["coerce_column", "coerce_columns", "validate_type_spec"]
