from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

import pytest

from fontprobe.defect import override_fallback_bug
from fontprobe.exceptions import MeasurementError


@dataclass(eq=False)
class _Element:
    text: str
    families: tuple[str, ...] = ()


@dataclass
class FakeMeasurer:
    """Measurer whose widths depend only on the first known family of a stack."""

    generic_widths: dict[str, float] = field(
        default_factory=lambda: {"sans-serif": 10.0, "serif": 12.0, "monospace": 15.0}
    )
    loaded: dict[str, float] = field(default_factory=dict)
    user_agent: str = "FakeMeasurer/1.0"
    fail_measurements: int = 0
    fail_releases: bool = False
    calls: int = 0
    live: list[_Element] = field(default_factory=list)

    def load(self, family: str, width: float) -> None:
        self.loaded[family] = width

    def acquire(self, text: str) -> _Element:
        element = _Element(text)
        self.live.append(element)
        return element

    def set_font_stack(self, handle: _Element, families: Sequence[str]) -> None:
        handle.families = tuple(families)

    def measure_width(self, handle: _Element) -> float:
        self.calls += 1
        if self.fail_measurements:
            self.fail_measurements -= 1
            raise MeasurementError("renderer unavailable")
        for family in handle.families:
            if family in self.loaded:
                return self.loaded[family]
            if family in self.generic_widths:
                return self.generic_widths[family]
        return 0.0

    def release(self, handle: _Element) -> None:
        if self.fail_releases:
            raise MeasurementError("element already detached")
        self.live.remove(handle)


@pytest.fixture(autouse=True)
def _reset_fallback_bug():
    override_fallback_bug(None)
    yield
    override_fallback_bug(None)


@pytest.fixture
def fake_measurer() -> FakeMeasurer:
    return FakeMeasurer()


@pytest.fixture(autouse=True)
def _reset_package_logger():
    package_logger = logging.getLogger("fontprobe")
    level = package_logger.level
    handlers = list(package_logger.handlers)
    yield
    package_logger.setLevel(level)
    package_logger.handlers[:] = handlers
