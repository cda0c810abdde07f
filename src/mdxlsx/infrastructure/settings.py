"""Settings for :mod:`mdxlsx` (infrastructure).

Settings are defined in one place (this file) and loaded using `pydantic-settings`.

Supported sources (lowest → highest precedence):
1) `settings.toml` (current working directory)
2) `.env` (current working directory)
3) environment variables (prefix: `MDXLSX_`)
4) explicit overrides (`Settings(...)` / CLI)

`settings.toml` is flat: keys map 1:1 to `Settings` fields. Every field has a
default, so no configuration is required.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, TomlConfigSettingsSource

ENV_PREFIX = "MDXLSX_"

# Excel rejects these characters in worksheet titles.
_INVALID_SHEET_CHARS = set("[]:*?/\\")


def _coerce_log_level(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("log_level must be an int or a log level name")

    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not text:
        return logging.INFO

    if text.isdigit():
        return int(text)

    mapped = logging.getLevelNamesMapping().get(text.upper())
    if isinstance(mapped, int):
        return mapped

    raise ValueError(f"Invalid log_level: {value!r}")


def _coerce_date_formats(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()

    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ()
        if "," in text:
            return tuple(part.strip() for part in text.split(",") if part.strip())
        return (text,)

    raise TypeError("date_formats must be a list/tuple of strings or a comma-separated string")


class Settings(BaseSettings):
    """Runtime settings for a conversion."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix=ENV_PREFIX,
        env_file=".env",
    )

    # Logging
    log_format: Literal["text", "ndjson"] = Field(default="text")
    log_level: int = Field(default=logging.INFO)

    # Parsing: header names (full match) treated as auto-generated placeholders.
    placeholder_header_pattern: str = Field(default=r"NA(?:\..*)?")

    # Coercion: tried in order for the "date" type.
    date_formats: tuple[str, ...] = Field(default=("%Y-%m-%d", "%Y/%m/%d"))

    # IO
    sheet_name: str = Field(default="Sheet1")
    input_encoding: str = Field(default="utf-8-sig")

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> int:
        return _coerce_log_level(value)

    @field_validator("date_formats", mode="before")
    @classmethod
    def _validate_date_formats(cls, value: Any) -> tuple[str, ...]:
        coerced = _coerce_date_formats(value)
        if not coerced:
            raise ValueError("date_formats must contain at least one format")
        return coerced

    @field_validator("placeholder_header_pattern")
    @classmethod
    def _validate_placeholder_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid placeholder_header_pattern: {exc}") from exc
        return value

    @field_validator("sheet_name")
    @classmethod
    def _validate_sheet_name(cls, value: str) -> str:
        name = value.strip()
        if not name or len(name) > 31:
            raise ValueError("sheet_name must be 1-31 characters")
        if any(ch in _INVALID_SHEET_CHARS for ch in name):
            raise ValueError("sheet_name must not contain any of: [ ] : * ? / \\")
        return name

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_files = None
        if hasattr(init_settings, "init_kwargs"):
            toml_files = init_settings.init_kwargs.get("_mdxlsx_toml_files")  # type: ignore[attr-defined]

        if toml_files is None:
            toml_files = [Path.cwd() / "settings.toml"]

        toml_settings = TomlConfigSettingsSource(settings_cls, toml_file=toml_files)

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            toml_settings,
            file_secret_settings,
        )

    @classmethod
    def load(cls, *, cwd: Path | None = None, **overrides: Any) -> "Settings":
        cwd_path = (cwd or Path.cwd()).expanduser().resolve()
        return cls(
            _mdxlsx_toml_files=[cwd_path / "settings.toml"],
            _env_file=cwd_path / ".env",
            **overrides,
        )


__all__ = ["ENV_PREFIX", "Settings"]
