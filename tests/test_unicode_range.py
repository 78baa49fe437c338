from __future__ import annotations

import pytest

from fontprobe.exceptions import MalformedRangeError
from fontprobe.ranges import Interval
from fontprobe.unicode_range import UnicodeRange


def _pairs(text: str) -> list[tuple[int, int]]:
    return [(interval.low, interval.high) for interval in UnicodeRange.parse(text)]


def test_parses_single_code_points() -> None:
    assert _pairs("u+0") == [(0, 0)]
    assert _pairs("u+f") == [(15, 15)]


def test_parses_wildcards() -> None:
    assert _pairs("u+0?") == [(0, 15)]
    assert _pairs("u+0?,u+f?") == [(0, 15), (240, 255)]
    assert _pairs("u+4??") == [(0x400, 0x4FF)]


def test_parses_ranges() -> None:
    assert _pairs("u+00-ff") == [(0, 255)]
    assert _pairs("u+00-ff,u+ff-fff") == [(0, 255), (255, 4095)]
    assert _pairs("u+0,u+f") == [(0, 0), (15, 15)]


def test_prefix_and_digits_are_case_insensitive() -> None:
    assert _pairs("U+4E2D") == [(0x4E2D, 0x4E2D)]
    assert str(UnicodeRange.parse("U+00A0-00FF")) == "u+a0-ff"


def test_whitespace_around_commas_is_ignored() -> None:
    assert _pairs("u+41, u+61 ,u+30-39") == [(0x41, 0x41), (0x61, 0x61), (0x30, 0x39)]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "not a range",
        "u+ffffffffffff",
        "u+ff-",
        "u+",
        "u+41,",
        "u+5a-41",
        "u+0-110000",
        "u+11????",
        "u+??????",
        "u+4?-4f",
        "41-5a",
        "u+0000041",
        "u+0000000?",
        "u+41-000005a",
    ],
)
def test_rejects_malformed_descriptors(text: str) -> None:
    with pytest.raises(MalformedRangeError) as excinfo:
        UnicodeRange.parse(text)
    assert excinfo.value.text == text


def test_malformed_range_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        UnicodeRange.parse("u+ff-")


def test_wildcards_up_to_the_last_plane_are_accepted() -> None:
    assert _pairs("u+10????") == [(0x100000, 0x10FFFF)]


def test_serializes_canonical_text() -> None:
    assert str(UnicodeRange.parse("u+ff")) == "u+ff"
    assert str(UnicodeRange.parse("u+0")) == "u+0"
    assert str(UnicodeRange.parse("u+0?")) == "u+0-f"
    assert str(UnicodeRange.parse("u+00-ff")) == "u+0-ff"
    assert str(UnicodeRange.parse("u+0,u+f")) == "u+0,u+f"


@pytest.mark.parametrize(
    "text",
    ["u+0", "u+0?", "u+00-ff", "u+0?,u+f?", "U+4E00-9FFF, u+3000-303f", "u+10????"],
)
def test_canonical_text_is_stable_when_reparsed(text: str) -> None:
    canonical = str(UnicodeRange.parse(text))
    assert str(UnicodeRange.parse(canonical)) == canonical


def test_point_and_one_wide_range_serialize_identically() -> None:
    point = UnicodeRange.parse("u+41")
    one_wide = UnicodeRange.parse("u+41-41")
    assert str(point) == str(one_wide) == "u+41"


def test_parse_string_collapses_duplicates() -> None:
    assert str(UnicodeRange.parse_string("hello")) == "u+65,u+68,u+6c,u+6f"
    assert str(UnicodeRange.parse_string("1")) == "u+31"


def test_parse_string_handles_bmp_text() -> None:
    assert str(UnicodeRange.parse_string("中国")) == "u+4e2d,u+56fd"


def test_parse_string_handles_astral_code_points() -> None:
    assert str(UnicodeRange.parse_string("a\U0001d306bc")) == "u+61,u+62,u+63,u+1d306"


def test_parse_string_joins_surrogate_pairs() -> None:
    text = b"a\xed\xa0\xb4\xed\xbc\x86".decode("utf-8", "surrogatepass")
    assert str(UnicodeRange.parse_string(text)) == "u+61,u+1d306"


def test_parse_string_of_empty_text_is_empty() -> None:
    assert str(UnicodeRange.parse_string("")) == ""


def test_intersects() -> None:
    parse = UnicodeRange.parse
    assert parse("u+0").intersects(parse("u+0"))
    assert parse("u+0-2").intersects(parse("u+2"))
    assert not parse("u+0").intersects(parse("u+1"))
    assert not parse("u+0-5").intersects(parse("u+6"))
    assert parse("u+0,u+2").intersects(parse("u+2,u+0"))
    assert parse("u+0-2,u+3").intersects(parse("u+3"))
    assert not parse("u+0,u+2").intersects(parse("u+1"))


def test_full_range_and_membership() -> None:
    full = UnicodeRange.full()
    assert str(full) == "u+0-10ffff"
    assert 0x10FFFF in full
    assert list(UnicodeRange.parse("u+41-42")) == [Interval(0x41, 0x42)]
