from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from mdxlsx.models.events import DEFAULT_EVENT


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Flatten a run log record into the fields both formats share."""

    fields: dict[str, Any] = {
        "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
        "level": record.levelname.lower(),
        "event": getattr(record, "event", DEFAULT_EVENT),
        "run_id": getattr(record, "run_id", ""),
        "message": record.getMessage(),
    }
    data = getattr(record, "data", None)
    if data:
        fields["data"] = dict(data)
    return fields


class NdjsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        fields = record_fields(record)
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)
        return json.dumps(fields, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """``<timestamp> LEVEL event: message key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        fields = record_fields(record)
        line = f"{fields['timestamp']} {fields['level'].upper():<7} {fields['event']}"
        if fields["message"] != fields["event"]:
            line += f": {fields['message']}"
        for key, value in fields.get("data", {}).items():
            line += f" {key}={value}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


__all__ = ["NdjsonFormatter", "TextFormatter", "record_fields"]
