from __future__ import annotations

import logging

import pytest

from fontprobe.cli.diagnostics import CliEmitter
from fontprobe.cli.state import set_cli_state
from fontprobe.diagnostics import DiagnosticEmitter, LoggingEmitter, format_event_message


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.ERROR):
        emitter.error("boom")
    assert any(record.message == "boom" for record in caplog.records)
    assert emitter.debug_enabled is True
    assert isinstance(emitter, DiagnosticEmitter)


def test_logging_emitter_attaches_traceback_in_debug(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.WARNING):
        emitter.warning("tick failed", ValueError("bad width"))
    record = caplog.records[-1]
    assert record.message == "tick failed"
    assert record.exc_info is not None


def test_logging_emitter_inlines_exception_otherwise(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.error("release failed", RuntimeError("detached"))
    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.message == "release failed: detached"
    assert not record.exc_info


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()
    with caplog.at_level(logging.DEBUG, logger="fontprobe"):
        emitter.event("observer_resolved", {"family": "Test", "ticks": 2})
        emitter.event("custom", {"flag": True})
    messages = [record.message for record in caplog.records]
    assert "Font 'Test' loaded after 2 tick(s)" in messages
    assert "diagnostic event custom: {'flag': True}" in messages


def test_cli_emitter_bridges_state(capsys: pytest.CaptureFixture[str]) -> None:
    state = set_cli_state(verbosity=1, debug=True)
    emitter = CliEmitter(state=state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=None)
    emitter.event("observer_timeout", {"family": "Test", "timeout_ms": 5})

    captured = capsys.readouterr()
    combined_output = f"{captured.out}\n{captured.err}"
    assert "Heads up" in combined_output
    assert "Boom" in combined_output
    assert "timed out after 5ms" in combined_output
    assert emitter.debug_enabled is True


def test_cli_emitter_hides_events_when_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    emitter = CliEmitter(state=set_cli_state(verbosity=0, debug=False))
    emitter.event("observer_resolved", {"family": "Test", "ticks": 1})
    captured = capsys.readouterr()
    assert "loaded after" not in captured.out + captured.err
    assert emitter.debug_enabled is False


def test_format_event_message() -> None:
    assert (
        format_event_message(
            "observer_baseline",
            {"family": "Test", "widths": {"sans-serif": 10.5, "serif": 12.0}},
        )
        == "Fallback widths for 'Test': sans-serif=10.5, serif=12"
    )
    assert (
        format_event_message("observer_timeout", {"family": "Test", "timeout_ms": 50})
        == "Font 'Test' timed out after 50ms"
    )
    assert format_event_message("unknown", {}) is None
