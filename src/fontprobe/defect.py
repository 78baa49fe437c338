"""Process-wide detection of the WebKit fallback-width defect.

Older WebKit builds report one width for every generic family while a web
font is still loading, so the regular fallback comparison cannot tell a
loaded font from a last-resort substitute. The result of the check is
computed on first use and kept for the lifetime of the process.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import re
from threading import Lock


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DefectRange:
    """Engine versions affected by the defect (``version < fixed_in``)."""

    engine: str
    pattern: re.Pattern[str]
    fixed_in: tuple[int, int]


DEFECT_TABLE: tuple[DefectRange, ...] = (
    DefectRange(
        engine="AppleWebKit",
        pattern=re.compile(r"AppleWeb[kK]it/(\d+)(?:\.(\d+))?"),
        fixed_in=(536, 12),
    ),
)

_HAS_FALLBACK_BUG: bool | None = None
_LOCK = Lock()


def detect_fallback_bug(user_agent: str) -> bool:
    """Classify ``user_agent`` against :data:`DEFECT_TABLE` without caching."""
    for entry in DEFECT_TABLE:
        match = entry.pattern.search(user_agent)
        if match is None:
            continue
        version = (int(match.group(1)), int(match.group(2) or 0))
        if version < entry.fixed_in:
            return True
    return False


def has_fallback_bug(user_agent: str | Callable[[], str]) -> bool:
    """Return the memoised defect flag, computing it on first call.

    ``user_agent`` is only read when the flag is still unknown.
    """
    global _HAS_FALLBACK_BUG
    cached = _HAS_FALLBACK_BUG
    if cached is not None:
        return cached
    with _LOCK:
        if _HAS_FALLBACK_BUG is None:
            value = user_agent() if callable(user_agent) else user_agent
            _HAS_FALLBACK_BUG = detect_fallback_bug(value)
            logger.debug("Fallback width defect for %r: %s", value, _HAS_FALLBACK_BUG)
        return _HAS_FALLBACK_BUG


def override_fallback_bug(value: bool | None) -> None:
    """Force the cached flag; ``None`` resets it to unknown."""
    global _HAS_FALLBACK_BUG
    with _LOCK:
        _HAS_FALLBACK_BUG = value


__all__ = [
    "DEFECT_TABLE",
    "DefectRange",
    "detect_fallback_bug",
    "has_fallback_bug",
    "override_fallback_bug",
]
