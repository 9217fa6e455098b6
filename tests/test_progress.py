"""Tests for ProgressReporter rendering."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from monorun.infra.io.progress import ProgressReporter
from tests.fakes.command_runner import fake_result


def _reporter(animate: bool = False) -> tuple[ProgressReporter, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=120, highlight=False)
    return ProgressReporter(console, animate=animate), buffer


class TestCaptureMode:
    def test_success_prints_glyph_line_only(self) -> None:
        reporter, buffer = _reporter()

        with reporter.track("Checking cv", capture_output=True) as scope:
            scope.finish(fake_result(0, stdout="lots of output"))

        assert buffer.getvalue() == "✓ Checking cv\n"

    def test_failure_prints_captured_output_indented(self) -> None:
        reporter, buffer = _reporter()

        with reporter.track("Checking cv", capture_output=True) as scope:
            scope.finish(fake_result(1, stdout="a.ts\n", stderr="b.ts\n"))

        assert buffer.getvalue() == "✗ Checking cv (exit 1)\n    a.ts\n    b.ts\n"

    def test_labels_are_not_markup(self) -> None:
        reporter, buffer = _reporter()

        with reporter.track("Checking [bold]cv[/bold]", capture_output=True) as scope:
            scope.finish(fake_result(0))

        assert "[bold]" in buffer.getvalue()

    def test_spinner_display_is_shared_and_stopped(self) -> None:
        reporter, _ = _reporter(animate=True)

        with reporter.track("one", capture_output=True) as first:
            with reporter.track("two", capture_output=True) as second:
                assert reporter._active == 2
                second.finish(fake_result(0))
            assert reporter._active == 1
            first.finish(fake_result(0))

        assert reporter._active == 0
        assert reporter._progress is None


class TestStreamedMode:
    def test_start_and_completion_lines(self) -> None:
        reporter, buffer = _reporter()

        with reporter.track("Formatting api", capture_output=False) as scope:
            scope.finish(fake_result(2, stdout="never shown"))

        assert buffer.getvalue() == "→ Formatting api\n✗ Formatting api (exit 2)\n"


def test_exception_is_reported_and_reraised() -> None:
    reporter, buffer = _reporter(animate=True)

    with pytest.raises(RuntimeError, match="boom"):
        with reporter.track("Checking cv", capture_output=True):
            raise RuntimeError("boom")

    assert "✗ Checking cv (error): boom" in buffer.getvalue()
    assert reporter._progress is None


def test_scope_without_result() -> None:
    reporter, buffer = _reporter()
    with reporter.track("noop", capture_output=True):
        pass
    assert buffer.getvalue() == "• noop\n"
