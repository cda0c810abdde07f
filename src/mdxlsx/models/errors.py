"""Error hierarchy for :mod:`mdxlsx`.

Only structural problems are raised; column-scoped problems are reported as
:class:`~mdxlsx.models.results.CoercionWarning` values instead.
"""

from __future__ import annotations


class MdxlsxError(Exception):
    """Base class for mdxlsx-specific exceptions."""


class InputError(MdxlsxError):
    """Raised when the markdown input or the table argument is unusable."""


class TypeSpecError(MdxlsxError):
    """Raised when the column type mapping is not a name -> type association."""


class OutputError(MdxlsxError):
    """Raised when the spreadsheet cannot be written."""


__all__ = [
    "MdxlsxError",
    "InputError",
    "TypeSpecError",
    "OutputError",
]
