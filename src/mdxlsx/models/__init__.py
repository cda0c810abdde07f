from mdxlsx.models.errors import InputError, MdxlsxError, OutputError, TypeSpecError
from mdxlsx.models.results import (
    CoercionResult,
    CoercionWarning,
    ColumnOutcome,
    ConversionResult,
    WarningCode,
)
from mdxlsx.models.run import ConversionRequest
from mdxlsx.models.types import ColumnType

__all__ = [
    "CoercionResult",
    "CoercionWarning",
    "ColumnOutcome",
    "ColumnType",
    "ConversionRequest",
    "ConversionResult",
    "InputError",
    "MdxlsxError",
    "OutputError",
    "TypeSpecError",
    "WarningCode",
]
