"""Command checking that a font file renders differently from the fallbacks."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from fontprobe.config import load_config
from fontprobe.exceptions import FontProbeError
from fontprobe.font_face import FontFace
from fontprobe.measure import PillowTextMeasurer
from fontprobe.observer import LoadObserver

from ..diagnostics import CliEmitter
from ..state import emit_error, emit_warning, get_cli_state


def observe(
    family: Annotated[str, typer.Argument(help="Font family to observe.")],
    font: Annotated[
        Path | None,
        typer.Option(
            "--font",
            "-f",
            exists=True,
            dir_okay=False,
            resolve_path=True,
            help="Font file registered under FAMILY.",
        ),
    ] = None,
    unicode_range: Annotated[
        str | None,
        typer.Option("--range", "-r", help="unicode-range descriptor of the font."),
    ] = None,
    probe: Annotated[
        str | None,
        typer.Option("--test-string", "-t", help="Literal probe string."),
    ] = None,
    timeout: Annotated[
        int | None,
        typer.Option("--timeout", min=1, help="Deadline in milliseconds."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", exists=True, dir_okay=False, help="YAML configuration."),
    ] = None,
) -> None:
    """Observe FAMILY with the Pillow measurer and report whether it loads."""
    state = get_cli_state()
    try:
        config = load_config(config_path)
        if timeout is not None:
            config.observer.timeout_ms = timeout
        measurer = PillowTextMeasurer(config=config.measurement)
        if font is not None:
            measurer.registry.register(family, font)
        face = FontFace(family, unicode_range=unicode_range) if unicode_range else FontFace(family)
        observer = LoadObserver(
            face,
            measurer,
            test_string=probe,
            config=config.observer,
            emitter=CliEmitter(state),
        )
        if not observer.test_string:
            emit_warning(f"Empty probe string for {family!r}; the result cannot be trusted.")
        asyncio.run(observer.wait())
    except (FontProbeError, ValueError, OSError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    state.console.print(
        f"[green]{family}[/green] loaded after {observer.ticks} tick(s) "
        f"using probe {observer.test_string!r}"
    )


__all__ = ["observe"]
