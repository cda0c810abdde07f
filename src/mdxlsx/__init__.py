"""Public API for :mod:`mdxlsx`."""

from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING
import tomllib

if TYPE_CHECKING:
    from mdxlsx.application.converter import Converter, convert_markdown
    from mdxlsx.application.pipeline.coerce import coerce_columns
    from mdxlsx.application.pipeline.parse import parse_markdown_table, read_markdown_table
    from mdxlsx.application.pipeline.render import write_workbook
    from mdxlsx.infrastructure.settings import Settings
    from mdxlsx.models import ColumnType, ConversionRequest, ConversionResult


def _pyproject_version() -> str | None:
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        parsed = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        version = parsed.get("project", {}).get("version")
        if isinstance(version, str) and version:
            return version
    except (FileNotFoundError, OSError, tomllib.TOMLDecodeError):
        return None
    return None


def _resolve_version() -> str:
    # Prefer the local pyproject when running from a source checkout/editable install.
    version = _pyproject_version()
    if version is not None:
        return version

    try:
        return metadata.version("mdxlsx")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "unknown"


__version__ = _resolve_version()

_EXPORTS = {
    "Converter": ("mdxlsx.application.converter", "Converter"),
    "convert_markdown": ("mdxlsx.application.converter", "convert_markdown"),
    "coerce_columns": ("mdxlsx.application.pipeline.coerce", "coerce_columns"),
    "parse_markdown_table": ("mdxlsx.application.pipeline.parse", "parse_markdown_table"),
    "read_markdown_table": ("mdxlsx.application.pipeline.parse", "read_markdown_table"),
    "write_workbook": ("mdxlsx.application.pipeline.render", "write_workbook"),
    "Settings": ("mdxlsx.infrastructure.settings", "Settings"),
    "ColumnType": ("mdxlsx.models", "ColumnType"),
    "ConversionRequest": ("mdxlsx.models", "ConversionRequest"),
    "ConversionResult": ("mdxlsx.models", "ConversionResult"),
}


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = __import__(module_name, fromlist=[attr_name])
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))


__all__ = [
    "ColumnType",
    "ConversionRequest",
    "ConversionResult",
    "Converter",
    "Settings",
    "coerce_columns",
    "convert_markdown",
    "parse_markdown_table",
    "read_markdown_table",
    "write_workbook",
    "__version__",
]
