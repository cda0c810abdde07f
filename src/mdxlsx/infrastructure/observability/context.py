from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from mdxlsx.infrastructure.observability.formatters import NdjsonFormatter, TextFormatter
from mdxlsx.infrastructure.observability.logger import RunLogger

_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "text": TextFormatter,
    "ndjson": NdjsonFormatter,
    "json": NdjsonFormatter,
}


def _formatter_for(log_format: str) -> logging.Formatter:
    try:
        return _FORMATTERS[(log_format or "text").strip().lower()]()
    except KeyError:
        raise ValueError(f"Unsupported log format {log_format!r}; use 'text' or 'ndjson'") from None


@contextmanager
def run_logger(
    *,
    log_format: str = "text",
    log_level: int = logging.INFO,
    log_file: Path | None = None,
    console: bool = True,
) -> Iterator[RunLogger]:
    """Yield a :class:`RunLogger` writing to stderr and/or ``log_file``.

    The log file records INFO and above even when the console is quieter, so
    ``conversion.completed`` always lands in it. Handlers are closed on exit.
    """

    formatter = _formatter_for(log_format)
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
        handlers[-1].setLevel(log_level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
        handlers[-1].setLevel(min(log_level, logging.INFO))
    if not handlers:
        handlers.append(logging.NullHandler())

    run_id = uuid.uuid4().hex
    # Not registered with logging.getLogger, so nothing outlives the run.
    base = logging.Logger(f"mdxlsx.run.{run_id}", level=min(h.level for h in handlers))
    for handler in handlers:
        handler.setFormatter(formatter)
        base.addHandler(handler)

    try:
        yield RunLogger(base, run_id=run_id)
    finally:
        for handler in handlers:
            base.removeHandler(handler)
            handler.close()


__all__ = ["run_logger"]
