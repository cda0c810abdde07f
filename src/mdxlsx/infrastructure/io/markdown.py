"""Markdown source helpers for :class:`~mdxlsx.application.converter.Converter`."""

from __future__ import annotations

from pathlib import Path

from mdxlsx.models.errors import InputError


def read_markdown_text(path: Path, *, encoding: str = "utf-8-sig") -> str:
    """Read a markdown file fully into memory."""

    source = Path(path).expanduser()
    if not source.exists():
        raise InputError(f"Markdown file not found: {source}")
    if not source.is_file():
        raise InputError(f"Markdown path is not a file: {source}")

    try:
        with source.open("r", encoding=encoding, newline="") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise InputError(f"Markdown file is not valid {encoding} text: {source}") from exc
    except OSError as exc:
        raise InputError(f"Failed to read markdown file {source}: {exc}") from exc


__all__ = ["read_markdown_text"]
