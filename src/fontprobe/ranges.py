"""Closed code point intervals and ordered interval sets."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


MAX_CODE_POINT = 0x10FFFF


@dataclass(frozen=True, slots=True)
class Interval:
    """Closed ``[low, high]`` range of Unicode code points."""

    low: int
    high: int

    def __post_init__(self) -> None:
        if not 0 <= self.low <= self.high <= MAX_CODE_POINT:
            raise ValueError(
                f"Invalid code point interval [{self.low:#x}, {self.high:#x}]"
            )

    def __contains__(self, code_point: object) -> bool:
        return isinstance(code_point, int) and self.low <= code_point <= self.high

    def __len__(self) -> int:
        return self.high - self.low + 1

    def overlaps(self, other: Interval) -> bool:
        """Return True when both intervals share at least one code point."""
        return self.low <= other.high and other.low <= self.high

    def to_canonical_text(self) -> str:
        if self.low == self.high:
            return f"u+{self.low:x}"
        return f"u+{self.low:x}-{self.high:x}"

    def __str__(self) -> str:
        return self.to_canonical_text()


@dataclass(frozen=True, slots=True)
class IntervalSet:
    """Intervals kept in insertion order.

    The set is neither sorted nor merged, so equality is structural: ``u+0-1``
    and ``u+0,u+1`` cover the same code points but compare unequal.
    """

    intervals: tuple[Interval, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, int]]) -> IntervalSet:
        """Build a set from ``(low, high)`` tuples."""
        return cls(tuple(Interval(low, high) for low, high in pairs))

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.intervals)

    def __len__(self) -> int:
        return len(self.intervals)

    def __bool__(self) -> bool:
        return bool(self.intervals)

    def __contains__(self, code_point: object) -> bool:
        return any(code_point in interval for interval in self.intervals)

    def covers_all(self) -> bool:
        """Return True for the single interval spanning every code point."""
        return self.intervals == (Interval(0, MAX_CODE_POINT),)

    def intersects(self, other: IntervalSet) -> bool:
        """Return True when any interval overlaps any interval of ``other``."""
        return any(
            mine.overlaps(theirs) for mine in self.intervals for theirs in other.intervals
        )

    def to_canonical_text(self) -> str:
        return ",".join(interval.to_canonical_text() for interval in self.intervals)

    def __str__(self) -> str:
        return self.to_canonical_text()


__all__ = ["MAX_CODE_POINT", "Interval", "IntervalSet"]
