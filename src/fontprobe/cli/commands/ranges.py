"""Commands inspecting ``unicode-range`` descriptors."""

from __future__ import annotations

from typing import Annotated

from rich import box
from rich.table import Table
import typer

from fontprobe.encoding import join_surrogates, utf16_code_units
from fontprobe.exceptions import MalformedRangeError
from fontprobe.unicode_range import UnicodeRange

from ..state import emit_error, get_cli_state


RangeArgument = Annotated[
    str,
    typer.Argument(metavar="RANGE", help="unicode-range descriptor, e.g. 'u+0-7f,u+4??'."),
]


def _parse_or_exit(text: str) -> UnicodeRange:
    try:
        return UnicodeRange.parse(text)
    except MalformedRangeError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def normalize(descriptor: RangeArgument) -> None:
    """Print the canonical form of a descriptor."""
    typer.echo(str(_parse_or_exit(descriptor)))


def test_string(
    descriptor: RangeArgument,
    length: Annotated[
        int,
        typer.Option("--length", "-n", min=1, help="Maximum number of code points."),
    ] = 7,
) -> None:
    """Print the probe string derived from a descriptor with its code units."""
    unicode_range = _parse_or_exit(descriptor)
    probe = join_surrogates(unicode_range.get_test_string(length))
    console = get_cli_state().console

    table = Table(box=box.SIMPLE, title=f"Probe string for {unicode_range}")
    table.add_column("Char")
    table.add_column("Code point")
    table.add_column("UTF-16")
    for char in probe:
        units = " ".join(f"{unit:04x}" for unit in utf16_code_units(ord(char)))
        table.add_row(char, f"u+{ord(char):x}", units)
    console.print(table)
    typer.echo(probe)


def from_text(
    text: Annotated[str, typer.Argument(help="Literal text to convert.")],
) -> None:
    """Print the descriptor covering the characters of a text."""
    typer.echo(str(UnicodeRange.parse_string(text)))


def intersects(first: RangeArgument, second: RangeArgument) -> None:
    """Exit with status 0 when both descriptors share a code point, 1 otherwise."""
    overlap = _parse_or_exit(first).intersects(_parse_or_exit(second))
    typer.echo("yes" if overlap else "no")
    if not overlap:
        raise typer.Exit(code=1)


__all__ = ["from_text", "intersects", "normalize", "test_string"]
