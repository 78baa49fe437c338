"""Exception hierarchy shared by the range parser and the load observer."""

from __future__ import annotations


class FontProbeError(RuntimeError):
    """Base exception for font probing failures."""


class MalformedRangeError(FontProbeError, ValueError):
    """Raised when a ``unicode-range`` descriptor cannot be parsed."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Invalid unicode-range {text!r}: {reason}")
        self.text = text
        self.reason = reason


class ObservationTimeout(FontProbeError):
    """Raised when a font never swapped in before the observer deadline."""

    def __init__(self, family: str, timeout_ms: int) -> None:
        super().__init__(f"Font {family!r} did not load within {timeout_ms}ms")
        self.family = family
        self.timeout_ms = timeout_ms


class MeasurementError(FontProbeError):
    """Raised when the text-measurement collaborator cannot report a width."""


class RuleError(FontProbeError):
    """Raised when an ``@font-face`` rule is malformed or detached."""


__all__ = [
    "FontProbeError",
    "MalformedRangeError",
    "MeasurementError",
    "ObservationTimeout",
    "RuleError",
]
