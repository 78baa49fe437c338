"""Text-measurement collaborator interface and its scoped ruler."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TextMeasurer(Protocol):
    """Lay out offscreen text and report its rendered width in pixels."""

    def acquire(self, text: str) -> Any: ...

    def set_font_stack(self, handle: Any, families: Sequence[str]) -> None: ...

    def measure_width(self, handle: Any) -> float: ...

    def release(self, handle: Any) -> None: ...


class Ruler:
    """Offscreen element measuring one text sample.

    Use it as a context manager, or call :meth:`insert` and :meth:`remove`
    explicitly when the element outlives a single block.
    """

    def __init__(self, measurer: TextMeasurer, text: str) -> None:
        self.measurer = measurer
        self.text = text
        self._handle: Any = None

    @property
    def inserted(self) -> bool:
        return self._handle is not None

    def insert(self) -> Ruler:
        if self._handle is None:
            self._handle = self.measurer.acquire(self.text)
        return self

    def set_font_stack(self, *families: str) -> None:
        self.measurer.set_font_stack(self._require_handle(), families)

    def get_width(self) -> float:
        return self.measurer.measure_width(self._require_handle())

    def remove(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self.measurer.release(handle)

    def _require_handle(self) -> Any:
        if self._handle is None:
            raise RuntimeError("Ruler is not inserted.")
        return self._handle

    def __enter__(self) -> Ruler:
        return self.insert()

    def __exit__(self, *exc_info: object) -> None:
        self.remove()


__all__ = ["Ruler", "TextMeasurer"]
