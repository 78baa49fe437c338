"""Parse and serialise the CSS ``unicode-range`` descriptor.

Grammar
: ``u+`` followed by hex digits, optionally ending in ``?`` wildcards, or
  ``u+<low>-<high>``. Tokens are separated by commas. The ``u+`` prefix and
  the digits are case-insensitive.

Wildcards
: Each trailing ``?`` stands for one hex nibble, so ``u+4??`` covers
  ``u+400-4ff``. Serialisation always expands wildcards into explicit ranges.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import re

from fontprobe.encoding import TEST_STRING_LENGTH, encode_code_point, get_test_string
from fontprobe.exceptions import MalformedRangeError
from fontprobe.ranges import MAX_CODE_POINT, Interval, IntervalSet


FULL_RANGE_TEXT = "u+0-10ffff"
MAX_HEX_DIGITS = 6

_TOKEN_RE = re.compile(
    r"u\+(?P<low>[0-9a-f]*)(?P<wild>\?*)(?P<dash>-(?P<high>[0-9a-f]*))?",
    re.IGNORECASE,
)


def _parse_token(token: str, text: str) -> Interval:
    match = _TOKEN_RE.fullmatch(token)
    if match is None:
        raise MalformedRangeError(text, f"unexpected token {token!r}")

    digits = match.group("low")
    wildcards = match.group("wild")
    if not digits and not wildcards:
        raise MalformedRangeError(text, f"missing code point in {token!r}")
    if len(digits) + len(wildcards) > MAX_HEX_DIGITS:
        raise MalformedRangeError(text, f"more than {MAX_HEX_DIGITS} hex digits in {token!r}")

    if wildcards:
        if match.group("dash"):
            raise MalformedRangeError(text, f"wildcards cannot start a range in {token!r}")
        low = int(digits or "0", 16) * 16 ** len(wildcards)
        high = low + 16 ** len(wildcards) - 1
        if high > MAX_CODE_POINT:
            raise MalformedRangeError(text, f"wildcard {token!r} expands past u+10ffff")
        return Interval(low, high)

    low = int(digits, 16)
    if low > MAX_CODE_POINT:
        raise MalformedRangeError(text, f"code point {token!r} exceeds u+10ffff")
    if not match.group("dash"):
        return Interval(low, low)

    high_digits = match.group("high")
    if not high_digits:
        raise MalformedRangeError(text, f"missing upper bound in {token!r}")
    if len(high_digits) > MAX_HEX_DIGITS:
        raise MalformedRangeError(text, f"more than {MAX_HEX_DIGITS} hex digits in {token!r}")
    high = int(high_digits, 16)
    if high > MAX_CODE_POINT:
        raise MalformedRangeError(text, f"upper bound in {token!r} exceeds u+10ffff")
    if high < low:
        raise MalformedRangeError(text, f"upper bound below lower bound in {token!r}")
    return Interval(low, high)


def _code_points(text: str) -> Iterator[int]:
    """Yield code points, joining surrogate pairs left in ``text``."""
    index = 0
    while index < len(text):
        unit = ord(text[index])
        if 0xD800 <= unit <= 0xDBFF and index + 1 < len(text):
            trail = ord(text[index + 1])
            if 0xDC00 <= trail <= 0xDFFF:
                yield 0x10000 + ((unit - 0xD800) << 10) + (trail - 0xDC00)
                index += 2
                continue
        yield unit
        index += 1


@dataclass(frozen=True, slots=True)
class UnicodeRange:
    """Parsed ``unicode-range`` descriptor."""

    ranges: IntervalSet

    @classmethod
    def parse(cls, text: str) -> UnicodeRange:
        """Parse descriptor text, raising :class:`MalformedRangeError` on failure."""
        if not text or not text.strip():
            raise MalformedRangeError(text, "empty descriptor")
        intervals = tuple(_parse_token(token.strip(), text) for token in text.split(","))
        return cls(IntervalSet(intervals))

    @classmethod
    def parse_string(cls, text: str) -> UnicodeRange:
        """Return one single point interval per distinct code point of ``text``, ascending."""
        code_points = sorted(set(_code_points(text)))
        return cls(IntervalSet.from_pairs((cp, cp) for cp in code_points))

    @classmethod
    def full(cls) -> UnicodeRange:
        return cls(IntervalSet.from_pairs([(0, MAX_CODE_POINT)]))

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.ranges)

    def __contains__(self, code_point: object) -> bool:
        return code_point in self.ranges

    def intersects(self, other: UnicodeRange) -> bool:
        return self.ranges.intersects(other.ranges)

    def encode_code_point(self, code_point: int) -> str:
        return encode_code_point(code_point)

    def get_test_string(self, length: int = TEST_STRING_LENGTH) -> str:
        return get_test_string(self.ranges, length)

    def __str__(self) -> str:
        return self.ranges.to_canonical_text()


__all__ = ["FULL_RANGE_TEXT", "UnicodeRange"]
