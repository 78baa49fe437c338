"""``@font-face`` descriptor objects."""

from __future__ import annotations

from dataclasses import dataclass, field

from fontprobe.encoding import TEST_STRING_LENGTH
from fontprobe.exceptions import RuleError
from fontprobe.rules import FontFaceRule, ParsedFontFaceRule, RuleSheet, serialize_declarations
from fontprobe.unicode_range import FULL_RANGE_TEXT, UnicodeRange


# Descriptor attribute -> CSS property, with the CSS initial value.
_DESCRIPTORS: dict[str, tuple[str, str]] = {
    "style": ("font-style", "normal"),
    "weight": ("font-weight", "normal"),
    "stretch": ("font-stretch", "normal"),
    "unicode_range": ("unicode-range", FULL_RANGE_TEXT),
    "variant": ("font-variant", "normal"),
    "feature_settings": ("font-feature-settings", "normal"),
}


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


@dataclass(frozen=True, slots=True)
class FontFace:
    """A web font family, its source and its descriptors.

    ``unicode_range`` is parsed eagerly, so an invalid descriptor raises
    :class:`~fontprobe.exceptions.MalformedRangeError` at construction.
    """

    family: str
    source: str = ""
    style: str = "normal"
    weight: str = "normal"
    stretch: str = "normal"
    unicode_range: str = FULL_RANGE_TEXT
    variant: str = "normal"
    feature_settings: str = "normal"
    ranges: UnicodeRange = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.family.strip():
            raise ValueError("Font family must not be empty.")
        object.__setattr__(self, "ranges", UnicodeRange.parse(self.unicode_range))

    @classmethod
    def from_rule(cls, rule: FontFaceRule) -> FontFace:
        """Build a descriptor from the declarations of ``rule``."""
        family = _unquote(rule.get_property_value("font-family"))
        if not family:
            raise RuleError(f"Rule has no font-family: {rule.css_text!r}")
        descriptors = {
            attribute: value
            for attribute, (prop, _default) in _DESCRIPTORS.items()
            if (value := rule.get_property_value(prop))
        }
        return cls(family, rule.get_property_value("src"), **descriptors)

    def declarations(self) -> dict[str, str]:
        """Return CSS declarations, skipping descriptors left at their initial value."""
        escaped = self.family.replace('"', '\\"')
        declarations = {"font-family": f'"{escaped}"'}
        if self.source:
            declarations["src"] = self.source
        for attribute, (prop, default) in _DESCRIPTORS.items():
            value = getattr(self, attribute)
            if value != default:
                declarations[prop] = str(self.ranges) if attribute == "unicode_range" else value
        return declarations

    @property
    def css_text(self) -> str:
        return serialize_declarations(self.declarations())

    def to_rule(self, sheet: RuleSheet | None = None) -> ParsedFontFaceRule:
        """Return an in-memory rule, inserted into ``sheet`` when given."""
        rule = ParsedFontFaceRule(self.declarations())
        if sheet is not None:
            sheet.insert(rule)
        return rule

    def test_string(self, length: int = TEST_STRING_LENGTH) -> str:
        return self.ranges.get_test_string(length)


__all__ = ["FontFace"]
