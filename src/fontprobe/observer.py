"""Detect when a web font starts rendering by polling text widths.

State machine
: ``INITIAL`` → ``MEASURING_FALLBACKS`` → ``POLLING`` → ``RESOLVED`` or
  ``TIMED_OUT``. Terminal states are final.

Fallback check
: The probe string is measured once in each generic family. While the font
  is missing, ``"<font>, sans-serif"`` and ``"<font>, serif"`` render exactly
  like their fallbacks. Monospace is left out of that comparison because its
  fallback width is unreliable across engines.

Last-resort check
: Engines with the fallback defect (see :mod:`fontprobe.defect`) render every
  family with one substitute font, so all three widths collapse to a single
  baseline width. That state is inconclusive and polling continues.

Scheduling
: Ticks and the deadline are ``loop.call_later`` handles on the running
  asyncio loop. Each tick measures synchronously and then yields. The caller
  awaits the single-shot future returned by :meth:`LoadObserver.start`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum
import logging

from fontprobe.config import GENERIC_FAMILIES, ObserverConfig
from fontprobe.defect import has_fallback_bug
from fontprobe.diagnostics import DiagnosticEmitter, LoggingEmitter
from fontprobe.exceptions import ObservationTimeout
from fontprobe.fallback import FallbackBaseline, FallbackFontCache
from fontprobe.font_face import FontFace
from fontprobe.ruler import Ruler, TextMeasurer


logger = logging.getLogger(__name__)


class ObserverState(Enum):
    INITIAL = "initial"
    MEASURING_FALLBACKS = "measuring_fallbacks"
    POLLING = "polling"
    RESOLVED = "resolved"
    TIMED_OUT = "timed_out"


class ObservationResult(Enum):
    """Terminal outcome of an observer run."""

    LOADED = "loaded"
    TIMED_OUT = "timed_out"


_TERMINAL = {ObserverState.RESOLVED, ObserverState.TIMED_OUT}


class LoadObserver:
    """Watch one font family until it renders or the deadline expires."""

    def __init__(
        self,
        font: FontFace | str,
        measurer: TextMeasurer,
        *,
        test_string: str | None = None,
        config: ObserverConfig | None = None,
        user_agent: str | Callable[[], str] | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.font = font if isinstance(font, FontFace) else FontFace(font)
        self.measurer = measurer
        self.config = config or ObserverConfig()
        self.emitter = emitter or LoggingEmitter(logger_obj=logger)
        self._explicit_test_string = test_string
        self._user_agent = user_agent
        self.state = ObserverState.INITIAL
        self.baseline: FallbackBaseline | None = None
        self.ticks = 0
        self._rulers: list[Ruler] = []
        self._future: asyncio.Future[ObservationResult] | None = None
        self._tick_handle: asyncio.Handle | None = None
        self._deadline_handle: asyncio.TimerHandle | None = None

    @property
    def family(self) -> str:
        return self.font.family

    @property
    def test_string(self) -> str:
        """Probe string: explicit text, else drawn from the font's unicode-range."""
        if self._explicit_test_string is not None:
            return self._explicit_test_string
        return self.font.test_string(self.config.test_string_length)

    @property
    def done(self) -> bool:
        return self.state in _TERMINAL

    @property
    def result(self) -> ObservationResult | None:
        if self.state is ObserverState.RESOLVED:
            return ObservationResult.LOADED
        if self.state is ObserverState.TIMED_OUT:
            return ObservationResult.TIMED_OUT
        return None

    def get_user_agent(self) -> str:
        if callable(self._user_agent):
            return self._user_agent()
        if self._user_agent is not None:
            return self._user_agent
        return str(getattr(self.measurer, "user_agent", ""))

    def has_fallback_bug(self) -> bool:
        return has_fallback_bug(self.get_user_agent)

    def is_fallback_font(self, width_sans: float, width_serif: float) -> bool:
        """Return True when both widths still match the sans-serif and serif fallbacks."""
        baseline = self._require_baseline()
        return width_sans == baseline.sans_serif and width_serif == baseline.serif

    def is_last_resort_font(self, *widths: float) -> bool:
        """Return True when every width collapsed onto one fallback width.

        Only meaningful on engines with the fallback defect; always False
        elsewhere.
        """
        if not widths or not self.has_fallback_bug():
            return False
        first = widths[0]
        if any(width != first for width in widths[1:]):
            return False
        return first in self._require_baseline().last_resort_widths()

    def start(self) -> asyncio.Future[ObservationResult]:
        """Begin observing and return the single-shot outcome future.

        Must be called from a running event loop. Calling it again returns the
        same future without measuring anything.
        """
        if self._future is not None:
            return self._future

        loop = asyncio.get_running_loop()
        text = self.test_string

        self.state = ObserverState.MEASURING_FALLBACKS
        try:
            self.baseline = FallbackFontCache(self.measurer, text).baseline
            for generic in GENERIC_FAMILIES:
                self._prepare_ruler(text, generic)
            self.emitter.event(
                "observer_baseline", {"family": self.family, "widths": dict(self.baseline)}
            )
        except Exception:
            self._release()
            self.state = ObserverState.INITIAL
            raise
        if not self.baseline.measured:
            logger.warning(
                "Probe %r renders no ink in some fallback family; %r cannot be detected.",
                text,
                self.family,
            )

        self._future = loop.create_future()
        self.state = ObserverState.POLLING
        self._deadline_handle = loop.call_later(
            self.config.timeout_ms / 1000, self._on_deadline
        )
        self._tick_handle = loop.call_soon(self._tick)
        return self._future

    async def wait(self) -> ObservationResult:
        return await self.start()

    def _prepare_ruler(self, text: str, generic: str) -> None:
        ruler = Ruler(self.measurer, text).insert()
        self._rulers.append(ruler)
        ruler.set_font_stack(self.family, generic)

    def _measure(self) -> tuple[float, ...]:
        return tuple(ruler.get_width() for ruler in self._rulers)

    def _tick(self) -> None:
        self._tick_handle = None
        if self.state is not ObserverState.POLLING:
            return
        self.ticks += 1
        try:
            widths = self._measure()
        except Exception as exc:
            self.emitter.warning(f"Measurement failed while observing {self.family!r}", exc)
            widths = None

        if widths is not None and self._swapped(widths):
            self._finish(ObserverState.RESOLVED)
            return

        loop = asyncio.get_running_loop()
        self._tick_handle = loop.call_later(self.config.poll_interval_ms / 1000, self._tick)

    def _swapped(self, widths: tuple[float, ...]) -> bool:
        width_sans, width_serif, _width_mono = widths
        if self.is_fallback_font(width_sans, width_serif):
            return False
        if self.is_last_resort_font(*widths):
            logger.debug("Widths %s for %r match a last-resort font", widths, self.family)
            return False
        return True

    def _on_deadline(self) -> None:
        self._deadline_handle = None
        if self.state is ObserverState.POLLING:
            self._finish(ObserverState.TIMED_OUT)

    def _finish(self, state: ObserverState) -> None:
        self.state = state
        for handle in (self._tick_handle, self._deadline_handle):
            if handle is not None:
                handle.cancel()
        self._tick_handle = None
        self._deadline_handle = None

        future = self._future
        try:
            if future is not None and not future.done():
                if state is ObserverState.RESOLVED:
                    future.set_result(ObservationResult.LOADED)
                else:
                    future.set_exception(ObservationTimeout(self.family, self.config.timeout_ms))
        finally:
            self._release()

        if state is ObserverState.RESOLVED:
            self.emitter.event("observer_resolved", {"family": self.family, "ticks": self.ticks})
        else:
            self.emitter.event(
                "observer_timeout",
                {"family": self.family, "timeout_ms": self.config.timeout_ms},
            )

    def _release(self) -> None:
        rulers, self._rulers = self._rulers, []
        for ruler in rulers:
            try:
                ruler.remove()
            except Exception as exc:
                self.emitter.error(f"Failed to release a ruler observing {self.family!r}", exc)

    def _require_baseline(self) -> FallbackBaseline:
        if self.baseline is None:
            raise RuntimeError("Fallback widths have not been measured yet.")
        return self.baseline

    def __repr__(self) -> str:
        return f"LoadObserver(family={self.family!r}, state={self.state.value})"


def observe(
    font: FontFace | str,
    measurer: TextMeasurer,
    *,
    test_string: str | None = None,
    config: ObserverConfig | None = None,
    user_agent: str | Callable[[], str] | None = None,
) -> ObservationResult:
    """Run an observer to completion on a fresh event loop.

    Returns :attr:`ObservationResult.TIMED_OUT` instead of raising when the
    deadline expires.
    """
    observer = LoadObserver(
        font, measurer, test_string=test_string, config=config, user_agent=user_agent
    )
    try:
        return asyncio.run(observer.wait())
    except ObservationTimeout:
        return ObservationResult.TIMED_OUT


__all__ = ["LoadObserver", "ObservationResult", "ObserverState", "observe"]
