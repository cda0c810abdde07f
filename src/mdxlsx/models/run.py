"""Request type for a single conversion.

``ConversionRequest`` is user-provided input (may include relative paths); the
converter normalizes paths before executing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from mdxlsx.models.types import ColumnType


@dataclass
class ConversionRequest:
    """Inputs for converting one markdown table."""

    markdown_file: Path
    file_name: Path | str
    col_types: Mapping[str, str | ColumnType] = field(default_factory=dict)

    # Logging: when set, events are also written to this file.
    log_file: Path | None = None


__all__ = ["ConversionRequest"]
