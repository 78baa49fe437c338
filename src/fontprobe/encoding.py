"""Encode code points back to text and derive probe strings from ranges."""

from __future__ import annotations

from fontprobe.ranges import MAX_CODE_POINT, Interval, IntervalSet


DEFAULT_TEST_STRING = "BESbswy"
TEST_STRING_LENGTH = 7

# Code points up to and including the space render no ink, neither does DEL.
_LAST_CONTROL = 0x20
_DELETE = 0x7F


def is_control(code_point: int) -> bool:
    """Return True for code points that never make a useful probe."""
    return code_point <= _LAST_CONTROL or code_point == _DELETE


def _all_control(interval: Interval) -> bool:
    if interval.high <= _LAST_CONTROL:
        return True
    return interval.low == interval.high == _DELETE


def utf16_code_units(code_point: int) -> tuple[int, ...]:
    """Return the UTF-16 code units for ``code_point``."""
    if not 0 <= code_point <= MAX_CODE_POINT:
        raise ValueError(f"Code point out of range: {code_point:#x}")
    if code_point <= 0xFFFF:
        return (code_point,)
    offset = code_point - 0x10000
    return (0xD800 + (offset >> 10), 0xDC00 + (offset & 0x3FF))


def encode_code_point(code_point: int) -> str:
    """Return the text form of ``code_point``.

    Code points in the BMP map to a single character, control codes included.
    Anything above ``0xFFFF`` is returned as a two character surrogate pair so
    the result lines up with UTF-16 based renderers.
    """
    return "".join(chr(unit) for unit in utf16_code_units(code_point))


def join_surrogates(text: str) -> str:
    """Collapse UTF-16 surrogate pairs in ``text`` into single code points."""
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


def get_test_string(ranges: IntervalSet, length: int = TEST_STRING_LENGTH) -> str:
    """Return up to ``length`` printable code points covered by ``ranges``.

    The full Unicode range yields :data:`DEFAULT_TEST_STRING`, whose glyphs
    vary widely in width between families.
    """
    if ranges.covers_all():
        return DEFAULT_TEST_STRING

    collected: list[str] = []
    for interval in ranges:
        if _all_control(interval):
            continue
        for code_point in range(interval.low, interval.high + 1):
            if len(collected) >= length:
                return "".join(collected)
            if is_control(code_point):
                continue
            collected.append(encode_code_point(code_point))
        if len(collected) >= length:
            break
    return "".join(collected)


__all__ = [
    "DEFAULT_TEST_STRING",
    "TEST_STRING_LENGTH",
    "encode_code_point",
    "get_test_string",
    "is_control",
    "join_surrogates",
    "utf16_code_units",
]
