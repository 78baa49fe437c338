"""Diagnostic abstractions shared by observers and the CLI."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.WARNING, message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.ERROR, message, exc)

    def _log(self, level: int, message: str, exc: BaseException | None) -> None:
        if exc is None:
            self._logger.log(level, message)
        elif self.debug_enabled:
            self._logger.log(level, message, exc_info=exc)
        else:
            self._logger.log(level, "%s: %s", message, exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for observer events."""
    data = dict(payload)
    family = data.get("family") or "<unknown>"

    if name == "observer_baseline":
        widths = data.get("widths") or {}
        details = ", ".join(f"{key}={value:g}" for key, value in widths.items())
        return f"Fallback widths for {family!r}: {details}"

    if name == "observer_resolved":
        ticks = data.get("ticks", 0)
        return f"Font {family!r} loaded after {ticks} tick(s)"

    if name == "observer_timeout":
        timeout = data.get("timeout_ms")
        return f"Font {family!r} timed out after {timeout}ms"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "format_event_message",
]
