"""Baseline widths of a probe string in the generic fallback families."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
import logging

from fontprobe.config import GENERIC_FAMILIES
from fontprobe.ruler import Ruler, TextMeasurer


logger = logging.getLogger(__name__)

SANS_SERIF, SERIF, MONOSPACE = GENERIC_FAMILIES
NOT_MEASURED = 0.0


@dataclass(frozen=True, slots=True)
class FallbackBaseline(Mapping[str, float]):
    """Widths of one probe string per generic family (``0`` when unmeasured)."""

    sans_serif: float = NOT_MEASURED
    serif: float = NOT_MEASURED
    monospace: float = NOT_MEASURED

    def __getitem__(self, family: str) -> float:
        if family not in GENERIC_FAMILIES:
            raise KeyError(family)
        return getattr(self, family.replace("-", "_"))

    def __iter__(self) -> Iterator[str]:
        return iter(GENERIC_FAMILIES)

    def __len__(self) -> int:
        return len(GENERIC_FAMILIES)

    @property
    def measured(self) -> bool:
        return all(width != NOT_MEASURED for width in self.values())

    def last_resort_widths(self) -> frozenset[float]:
        """Widths a last-resort font could collapse every family to."""
        return frozenset(self.values())


class FallbackFontCache:
    """Measure and memoise the fallback widths of a probe string.

    Each generic family is measured once, with a ruler that is released right
    after the measurement.
    """

    def __init__(self, measurer: TextMeasurer, text: str) -> None:
        self.measurer = measurer
        self.text = text
        self._baseline: FallbackBaseline | None = None

    @property
    def baseline(self) -> FallbackBaseline:
        if self._baseline is None:
            self._baseline = self._measure()
        return self._baseline

    def _measure(self) -> FallbackBaseline:
        widths: dict[str, float] = {}
        for family in GENERIC_FAMILIES:
            with Ruler(self.measurer, self.text) as ruler:
                ruler.set_font_stack(family)
                widths[family] = ruler.get_width()
        logger.debug("Fallback widths for %r: %s", self.text, widths)
        return FallbackBaseline(
            sans_serif=widths[SANS_SERIF],
            serif=widths[SERIF],
            monospace=widths[MONOSPACE],
        )


__all__ = [
    "MONOSPACE",
    "NOT_MEASURED",
    "SANS_SERIF",
    "SERIF",
    "FallbackBaseline",
    "FallbackFontCache",
]
