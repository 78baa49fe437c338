from __future__ import annotations

import pytest

from fontprobe.exceptions import MalformedRangeError, RuleError
from fontprobe.font_face import FontFace
from fontprobe.rules import ParsedFontFaceRule, RuleSheet


def test_defaults_cover_every_code_point() -> None:
    face = FontFace("Test")
    assert face.ranges.ranges.covers_all()
    assert face.test_string() == "BESbswy"
    assert face.css_text == '@font-face { font-family: "Test"; }'


def test_empty_family_is_rejected() -> None:
    with pytest.raises(ValueError):
        FontFace("  ")


def test_invalid_unicode_range_is_rejected() -> None:
    with pytest.raises(MalformedRangeError):
        FontFace("Test", unicode_range="u+zz")


def test_declarations_skip_initial_values_and_normalize_ranges() -> None:
    face = FontFace(
        "My Font",
        source="url(my.woff2) format('woff2')",
        weight="700",
        unicode_range="U+0041-005A, u+4??",
    )
    assert face.declarations() == {
        "font-family": '"My Font"',
        "src": "url(my.woff2) format('woff2')",
        "font-weight": "700",
        "unicode-range": "u+41-5a,u+400-4ff",
    }
    assert face.test_string(3) == "ABC"


def test_from_rule_reads_descriptors() -> None:
    rule = ParsedFontFaceRule.parse(
        "@font-face { font-family: 'Test Sans'; src: url(t.woff); "
        "font-style: italic; unicode-range: u+30-39; }"
    )
    face = FontFace.from_rule(rule)

    assert face.family == "Test Sans"
    assert face.source == "url(t.woff)"
    assert face.style == "italic"
    assert face.weight == "normal"
    assert face.test_string() == "0123456"


def test_from_rule_requires_a_family() -> None:
    with pytest.raises(RuleError):
        FontFace.from_rule(ParsedFontFaceRule.parse("@font-face { src: url(t.woff); }"))


def test_to_rule_inserts_into_sheet() -> None:
    sheet = RuleSheet()
    rule = FontFace("Test", style="italic").to_rule(sheet)

    assert rule.index_of() == 0
    assert rule.get_property_value("font-style") == "italic"
    assert FontFace.from_rule(rule) == FontFace("Test", style="italic")
