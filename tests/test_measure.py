from __future__ import annotations

import asyncio
from pathlib import Path
import sys

import pytest

from fontprobe.config import MeasurementConfig, ObserverConfig
from fontprobe.exceptions import MeasurementError
from fontprobe.measure import FontRegistry, PillowTextMeasurer, normalize_family
from fontprobe.observer import LoadObserver, ObservationResult, ObserverState, observe
from fontprobe.ruler import Ruler, TextMeasurer


def test_normalize_family_ignores_case_quotes_and_separators() -> None:
    assert normalize_family("'Noto Sans-CJK_JP'") == "notosanscjkjp"
    assert normalize_family("  Serif ") == "serif"


def test_registry_resolves_registered_and_generic_families(tmp_path: Path) -> None:
    generic = tmp_path / "sans.ttf"
    registry = FontRegistry({"sans-serif": generic})
    registry.register("My Font", tmp_path / "my.ttf")

    assert registry.resolve("my-font") == tmp_path / "my.ttf"
    assert registry.resolve("Sans-Serif") == generic
    assert registry.resolve("missing") is None
    assert "My Font" in registry

    registry.unregister("MY FONT")
    assert "My Font" not in registry


def test_pillow_measurer_reports_positive_widths() -> None:
    measurer = PillowTextMeasurer()
    assert isinstance(measurer, TextMeasurer)
    assert measurer.user_agent.startswith("Pillow/")

    with Ruler(measurer, "BESbswy") as ruler:
        ruler.set_font_stack("sans-serif")
        narrow = ruler.get_width()
    with Ruler(measurer, "BESbswyBESbswy") as ruler:
        ruler.set_font_stack("sans-serif")
        wide = ruler.get_width()

    assert 0 < narrow < wide
    assert measurer.elements == []


def test_pillow_measurer_joins_surrogate_pairs() -> None:
    measurer = PillowTextMeasurer()
    handle = measurer.acquire("𝌆")
    assert handle.text == "\U0001d306"
    measurer.release(handle)


def test_released_handle_cannot_be_measured() -> None:
    measurer = PillowTextMeasurer()
    handle = measurer.acquire("abc")
    measurer.release(handle)
    measurer.release(handle)

    with pytest.raises(MeasurementError):
        measurer.measure_width(handle)


def test_missing_font_file_raises_measurement_error(tmp_path: Path) -> None:
    measurer = PillowTextMeasurer(config=MeasurementConfig(font_size=24))
    measurer.registry.register("Broken", tmp_path / "missing.ttf")

    with Ruler(measurer, "abc") as ruler:
        ruler.set_font_stack("Broken", "serif")
        with pytest.raises(MeasurementError):
            ruler.get_width()


def test_unregistered_family_times_out_with_pillow() -> None:
    measurer = PillowTextMeasurer()
    config = ObserverConfig(timeout_ms=40, poll_interval_ms=5)

    assert observe("Not Installed", measurer, config=config) is ObservationResult.TIMED_OUT
    assert measurer.elements == []


_FONT_DIRS = (
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("C:/Windows/Fonts"),
    Path(sys.prefix) / "share" / "fonts",
)


@pytest.fixture
def truetype_font() -> Path:
    for directory in _FONT_DIRS:
        if not directory.is_dir():
            continue
        for candidate in sorted(directory.rglob("*.ttf")):
            return candidate
    pytest.skip("No TrueType font installed on this system")


def test_registering_family_while_polling_resolves(truetype_font: Path) -> None:
    measurer = PillowTextMeasurer()
    config = ObserverConfig(timeout_ms=2000, poll_interval_ms=5)
    observer = LoadObserver("Late Font", measurer, config=config)

    async def scenario() -> ObservationResult:
        future = observer.start()
        loop = asyncio.get_running_loop()
        loop.call_later(0.03, measurer.registry.register, "Late Font", truetype_font)
        return await future

    assert asyncio.run(scenario()) is ObservationResult.LOADED
    assert observer.state is ObserverState.RESOLVED
    assert observer.ticks > 1
    assert measurer.elements == []
