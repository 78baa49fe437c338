"""Pillow backed text measurement.

`FontRegistry` plays the role of the browser font list: a family only
renders once it has been registered against a font file, so registering a
family while an observer polls behaves like a web font finishing its
download. `PillowTextMeasurer` walks a font stack the way a renderer does and
measures the advance width of the text with the first family it can resolve.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path

import PIL
from PIL import ImageFont

from fontprobe.config import MeasurementConfig
from fontprobe.encoding import join_surrogates
from fontprobe.exceptions import MeasurementError


logger = logging.getLogger(__name__)


def normalize_family(name: str) -> str:
    """Return a normalised font family key suitable for lookups."""
    stripped = name.strip().strip("\"'")
    return "".join(ch for ch in stripped.casefold() if ch not in {" ", "-", "_"})


@lru_cache(maxsize=64)
def _load_font(path: str, size: int) -> ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(path, size)
    except OSError as exc:
        raise MeasurementError(f"Unable to load font file {path}: {exc}") from exc


@lru_cache(maxsize=8)
def _default_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


class FontRegistry:
    """Map font family names to font files."""

    def __init__(self, generic_fonts: Mapping[str, Path] | None = None) -> None:
        self._families: dict[str, Path] = {}
        self._generic: dict[str, Path] = {
            normalize_family(name): Path(path) for name, path in (generic_fonts or {}).items()
        }

    def register(self, family: str, path: str | Path) -> None:
        self._families[normalize_family(family)] = Path(path)
        logger.debug("Registered font family %r from %s", family, path)

    def unregister(self, family: str) -> None:
        self._families.pop(normalize_family(family), None)

    def resolve(self, family: str) -> Path | None:
        """Return the file backing ``family``, generic families included."""
        key = normalize_family(family)
        return self._families.get(key) or self._generic.get(key)

    def __contains__(self, family: object) -> bool:
        return isinstance(family, str) and self.resolve(family) is not None


@dataclass(slots=True, eq=False)
class _Element:
    text: str
    families: tuple[str, ...] = ()
    attached: bool = True


class PillowTextMeasurer:
    """Measure text widths with Pillow's FreeType bindings."""

    def __init__(
        self,
        registry: FontRegistry | None = None,
        *,
        config: MeasurementConfig | None = None,
    ) -> None:
        self.config = config or MeasurementConfig()
        self.registry = registry or FontRegistry(self.config.generic_fonts)
        self.elements: list[_Element] = []

    @property
    def user_agent(self) -> str:
        return f"Pillow/{PIL.__version__}"

    def acquire(self, text: str) -> _Element:
        element = _Element(text=join_surrogates(text))
        self.elements.append(element)
        return element

    def set_font_stack(self, handle: _Element, families: Sequence[str]) -> None:
        self._check(handle)
        handle.families = tuple(families)

    def measure_width(self, handle: _Element) -> float:
        self._check(handle)
        font = self._resolve_font(handle.families)
        return float(font.getlength(handle.text))

    def release(self, handle: _Element) -> None:
        if not handle.attached:
            return
        handle.attached = False
        self.elements.remove(handle)

    def _check(self, handle: _Element) -> None:
        if not handle.attached:
            raise MeasurementError("Cannot measure a released element.")

    def _resolve_font(
        self, families: Sequence[str]
    ) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        for family in families:
            path = self.registry.resolve(family)
            if path is not None:
                return _load_font(str(path), self.config.font_size)
        logger.debug("No registered family in stack %s", ", ".join(families))
        return _default_font(self.config.font_size)


__all__ = ["FontRegistry", "PillowTextMeasurer", "normalize_family"]
