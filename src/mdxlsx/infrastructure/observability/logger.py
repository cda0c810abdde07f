"""Run-scoped logging for a single conversion.

Every record carries the run id and an ``event`` name. Plain log lines use
``mdxlsx.log``; domain events go through :meth:`RunLogger.event`, whose payload
is checked against the schema registered in :mod:`mdxlsx.models.events`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from mdxlsx.models.events import DEFAULT_EVENT, MDXLSX_NAMESPACE, validate_event_payload


def qualify_event_name(name: str) -> str:
    """``"table.parsed"`` -> ``"mdxlsx.table.parsed"``; qualified names pass through."""

    short = name.strip().strip(".")
    if short.startswith(f"{MDXLSX_NAMESPACE}."):
        return short
    return f"{MDXLSX_NAMESPACE}.{short}"


class RunLogger(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, *, run_id: str | None = None) -> None:
        super().__init__(logger, {"run_id": run_id or uuid.uuid4().hex})

    @property
    def run_id(self) -> str:
        return self.extra["run_id"]

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = {"event": DEFAULT_EVENT, **(kwargs.get("extra") or {})}
        extra["run_id"] = self.run_id
        kwargs["extra"] = extra
        return msg, kwargs

    def event(
        self,
        name: str,
        *,
        message: str | None = None,
        level: int = logging.INFO,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Log the domain event ``name`` with a validated ``data`` payload."""

        if not self.isEnabledFor(level):
            return

        event = qualify_event_name(name)
        payload = validate_event_payload(event, dict(data or {}))
        extra: dict[str, Any] = {"event": event}
        if payload:
            extra["data"] = payload
        self.log(level, message or event, extra=extra)


_DISCARD = logging.Logger("mdxlsx.discard")
_DISCARD.disabled = True


class NullLogger(RunLogger):
    """Drops every record; the default when callers pass no logger."""

    def __init__(self) -> None:
        super().__init__(_DISCARD, run_id="null")

    def __bool__(self) -> bool:
        return False


__all__ = ["NullLogger", "RunLogger", "qualify_event_name"]
