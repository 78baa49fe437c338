"""CLI command implementations."""

from __future__ import annotations

from .observe import observe
from .ranges import from_text, intersects, normalize, test_string


__all__ = ["from_text", "intersects", "normalize", "observe", "test_string"]
