from __future__ import annotations

from enum import Enum
from typing import Any


class ColumnType(str, Enum):
    """Target types a column can be coerced to."""

    NUMERIC = "numeric"
    INTEGER = "integer"
    CHARACTER = "character"
    LOGICAL = "logical"
    DATE = "date"
    FACTOR = "factor"

    @classmethod
    def resolve(cls, tag: Any) -> "ColumnType | None":
        """Resolve a user supplied tag; ``None`` when the tag is not supported.

        Matching is case-insensitive so ``"Date"`` and ``"date"`` are the same tag.
        """

        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            return None

        key = tag.strip().lower()
        try:
            return cls(key)
        except ValueError:
            return _ALIASES.get(key)


_ALIASES: dict[str, ColumnType] = {
    "double": ColumnType.NUMERIC,
    "float": ColumnType.NUMERIC,
    "int": ColumnType.INTEGER,
    "str": ColumnType.CHARACTER,
    "string": ColumnType.CHARACTER,
    "bool": ColumnType.LOGICAL,
    "boolean": ColumnType.LOGICAL,
    "category": ColumnType.FACTOR,
    "categorical": ColumnType.FACTOR,
}


def type_tag_text(tag: Any) -> str:
    """Readable form of a tag for warnings and log payloads."""

    if isinstance(tag, ColumnType):
        return tag.value
    return str(tag)


__all__ = ["ColumnType", "type_tag_text"]
