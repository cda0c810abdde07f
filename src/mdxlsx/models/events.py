"""Event payload schemas and schema registry for mdxlsx logging.

Payload models are strict:
- ``extra="forbid"`` to prevent accidental schema drift
- runtime validation uses ``model_validate(..., strict=True)``
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError

MDXLSX_NAMESPACE = "mdxlsx"

DEFAULT_EVENT = f"{MDXLSX_NAMESPACE}.log"  # plain log lines

PayloadModel: TypeAlias = type[BaseModel] | None


class StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


NonNegativeInt = Annotated[int, Field(ge=0)]

SchemaVersion = Literal[1]


class StrictPayloadV1(StrictModel):
    schema_version: SchemaVersion = 1


class ConversionStartedPayloadV1(StrictPayloadV1):
    input_file: str
    output_file: str
    column_types: dict[str, str]


class TableParsedPayloadV1(StrictPayloadV1):
    row_count: NonNegativeInt
    column_count: NonNegativeInt
    columns: list[str]
    dropped_columns: list[str]
    renamed_columns: dict[str, str]


class ColumnCoercedPayloadV1(StrictPayloadV1):
    column: str
    column_type: str
    row_count: NonNegativeInt
    missing_introduced: NonNegativeInt
    sample_before: list[Any] | None = None
    sample_after: list[Any] | None = None


class ColumnWarningPayloadV1(StrictPayloadV1):
    column: str
    type_tag: str
    code: str


class WorkbookWrittenPayloadV1(StrictPayloadV1):
    output_file: str
    sheet_name: str
    row_count: NonNegativeInt
    column_count: NonNegativeInt
    output_range: str


class ConversionCompletedPayloadV1(StrictPayloadV1):
    status: Literal["succeeded", "failed"]
    input_file: str
    output_file: str | None = None
    row_count: NonNegativeInt | None = None
    warning_count: NonNegativeInt = 0
    duration_ms: NonNegativeInt
    error: str | None = None


# None marks a known event whose payload is freeform.
EVENT_SCHEMAS: dict[str, PayloadModel] = {
    DEFAULT_EVENT: None,
    f"{MDXLSX_NAMESPACE}.settings.effective": None,
    f"{MDXLSX_NAMESPACE}.conversion.started": ConversionStartedPayloadV1,
    f"{MDXLSX_NAMESPACE}.table.parsed": TableParsedPayloadV1,
    f"{MDXLSX_NAMESPACE}.column.coerced": ColumnCoercedPayloadV1,
    f"{MDXLSX_NAMESPACE}.column.warning": ColumnWarningPayloadV1,
    f"{MDXLSX_NAMESPACE}.workbook.written": WorkbookWrittenPayloadV1,
    f"{MDXLSX_NAMESPACE}.conversion.completed": ConversionCompletedPayloadV1,
}


def validate_event_payload(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Return ``payload`` normalized through the schema registered for ``event``.

    Raises ``ValueError`` for unregistered events and payloads that do not match.
    """

    if event not in EVENT_SCHEMAS:
        raise ValueError(f"Unknown event '{event}'; register it in EVENT_SCHEMAS")
    schema = EVENT_SCHEMAS[event]
    if schema is None:
        return payload
    try:
        return schema.model_validate(payload, strict=True).model_dump(mode="python")
    except ValidationError as exc:
        raise ValueError(f"Invalid payload for event '{event}': {exc}") from exc


__all__ = [
    "DEFAULT_EVENT",
    "EVENT_SCHEMAS",
    "MDXLSX_NAMESPACE",
    "PayloadModel",
    "validate_event_payload",
]
