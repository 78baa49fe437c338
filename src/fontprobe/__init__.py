"""Web font load detection and ``unicode-range`` algebra.

Architecture
: `UnicodeRange` parses the CSS ``unicode-range`` descriptor into an ordered
  `IntervalSet`, serialises it back to canonical text, and derives the short
  probe string used to tell fonts apart.
: `FontFace` bundles a family with its descriptors. `LiveFontFaceRule` and
  `ParsedFontFaceRule` expose ``@font-face`` rules through one interface.
: `LoadObserver` measures the probe string in the three generic fallback
  families through a `TextMeasurer`, then polls the candidate family layered
  over each fallback until the widths change or the deadline expires.
: `PillowTextMeasurer` is a concrete measurer backed by Pillow, with a
  `FontRegistry` standing in for the renderer's font list.

Goal
: Know when a font is actually rendering a given text, without relying on
  load events, and with a bounded wait.
"""

from fontprobe.config import MeasurementConfig, ObserverConfig, ProbeConfig, load_config
from fontprobe.encoding import DEFAULT_TEST_STRING, encode_code_point, get_test_string
from fontprobe.exceptions import (
    FontProbeError,
    MalformedRangeError,
    MeasurementError,
    ObservationTimeout,
    RuleError,
)
from fontprobe.fallback import FallbackBaseline, FallbackFontCache
from fontprobe.font_face import FontFace
from fontprobe.measure import FontRegistry, PillowTextMeasurer
from fontprobe.observer import LoadObserver, ObservationResult, ObserverState, observe
from fontprobe.ranges import Interval, IntervalSet
from fontprobe.ruler import Ruler, TextMeasurer
from fontprobe.rules import LiveFontFaceRule, ParsedFontFaceRule, RuleSheet
from fontprobe.unicode_range import UnicodeRange


__all__ = [
    "DEFAULT_TEST_STRING",
    "FallbackBaseline",
    "FallbackFontCache",
    "FontFace",
    "FontProbeError",
    "FontRegistry",
    "Interval",
    "IntervalSet",
    "LiveFontFaceRule",
    "LoadObserver",
    "MalformedRangeError",
    "MeasurementConfig",
    "MeasurementError",
    "ObservationResult",
    "ObservationTimeout",
    "ObserverConfig",
    "ObserverState",
    "ParsedFontFaceRule",
    "PillowTextMeasurer",
    "ProbeConfig",
    "Ruler",
    "RuleError",
    "RuleSheet",
    "TextMeasurer",
    "UnicodeRange",
    "encode_code_point",
    "get_test_string",
    "load_config",
    "observe",
]
