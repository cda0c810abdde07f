"""Shared helpers/options for the mdxlsx CLI.

Keep this module dependency-light; it should be safe to import from any CLI command module.
"""

from __future__ import annotations

import json
import logging
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

import typer
from typer import BadParameter

from mdxlsx.infrastructure.settings import Settings


class LogFormat(str, Enum):
    """Supported log output formats."""

    text = "text"
    ndjson = "ndjson"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def resolve_log_level(log_level: Optional[str], default_level: int) -> int:
    """Resolve a string log level to a logging level constant."""
    if not log_level:
        return default_level

    mapping = logging.getLevelNamesMapping()
    resolved = mapping.get(str(log_level).upper())
    if isinstance(resolved, int):
        return resolved

    raise BadParameter(f"Invalid log level: {log_level}", param_hint="log_level")


def resolve_logging(
    *,
    log_format: Optional[LogFormat],
    log_level: Optional[str],
    debug: bool,
    quiet: bool,
    settings: Settings,
) -> tuple[str, int]:
    """Compute effective log format/level with explicit precedence.

    Precedence: --quiet > --debug > --log-level > defaults.
    """
    effective_format = log_format.value if log_format else settings.log_format
    base_level = resolve_log_level(log_level, settings.log_level)

    if quiet:
        effective_level = logging.WARNING
    elif debug:
        effective_level = logging.DEBUG
    else:
        effective_level = base_level

    return effective_format, effective_level


# ---------------------------------------------------------------------------
# Column types
# ---------------------------------------------------------------------------


def parse_type_options(values: Iterable[str]) -> dict[str, str]:
    """Parse repeated ``NAME=TYPE`` options.

    The split happens on the last ``=`` so column names may contain ``=``.
    """
    parsed: dict[str, str] = {}
    for raw in values:
        name, sep, tag = raw.rpartition("=")
        name, tag = name.strip(), tag.strip()
        if not sep or not name or not tag:
            raise BadParameter(f"Expected NAME=TYPE, got {raw!r}", param_hint="--type")
        if name in parsed:
            raise BadParameter(f"Column '{name}' given more than once", param_hint="--type")
        parsed[name] = tag
    return parsed


def load_types_file(path: Path) -> dict[str, str]:
    """Load a flat column -> type mapping from a TOML or JSON file."""
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
        if suffix == ".toml":
            data: Any = tomllib.loads(text)
        elif suffix == ".json":
            data = json.loads(text)
        else:
            raise BadParameter("Types file must be .toml or .json", param_hint="--types-file")
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise BadParameter(f"Could not read types file {path}: {exc}", param_hint="--types-file") from exc

    if not isinstance(data, dict):
        raise BadParameter("Types file must contain a name -> type table", param_hint="--types-file")

    out: dict[str, str] = {}
    for name, tag in data.items():
        if not isinstance(tag, str):
            raise BadParameter(
                f"Type for column '{name}' must be a string (got {type(tag).__name__})",
                param_hint="--types-file",
            )
        out[str(name)] = tag
    return out


# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

LOG_FORMAT_OPTION = typer.Option(
    None,
    "--log-format",
    case_sensitive=False,
    help="Log output format.",
)
LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    case_sensitive=False,
    help="Log level (debug, info, warning, error, critical).",
)
DEBUG_OPTION = typer.Option(
    False,
    "--debug",
    help="Enable debug logging and verbose diagnostics.",
)
QUIET_OPTION = typer.Option(
    False,
    "--quiet",
    help="Reduce output to warnings and errors.",
)


__all__ = [
    "DEBUG_OPTION",
    "LOG_FORMAT_OPTION",
    "LOG_LEVEL_OPTION",
    "QUIET_OPTION",
    "LogFormat",
    "load_types_file",
    "parse_type_options",
    "resolve_log_level",
    "resolve_logging",
]
