"""Tests for failure summary extraction and rendering."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import pytest

from monorun.domain.e2e.report import (
    FailureEntry,
    FailureSummary,
    summarize_failures,
    write_summary,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write_report(path: Path, failures: Any) -> Path:  # noqa: ANN401
    path.write_text(json.dumps({"run": {"stats": {}, "failures": failures}}))
    return path


class TestSummarizeFailures:
    def test_zero_failures(self, tmp_path: Path) -> None:
        report = _write_report(tmp_path / "r.json", [])

        summary = summarize_failures(report, "backend")

        assert summary.report_found
        assert summary.entries == ()
        assert summary.render() == (
            "### Failed Assertions (backend)\nNo failed assertions.\n"
        )

    def test_entries_are_ordered_and_resolved(self, tmp_path: Path) -> None:
        report = _write_report(
            tmp_path / "r.json",
            [
                {
                    "assertion": "Status code is 200",
                    "error": {"message": "expected 500 to equal 200"},
                    "source": {"name": "GET /invoices"},
                },
                {
                    "assertion": "Has body",
                    "error": "flat error",
                    "parent": {"name": "Invoices folder"},
                },
            ],
        )

        summary = summarize_failures(report, "backend")

        assert summary.entries == (
            FailureEntry("Status code is 200", "expected 500 to equal 200", "GET /invoices"),
            FailureEntry("Has body", "flat error", "Invoices folder"),
        )
        assert summary.render() == (
            "### Failed Assertions (backend)\n"
            "1. AssertionError  Status code is 200\n"
            "   expected 500 to equal 200\n"
            '   in "GET /invoices"\n'
            "\n"
            "2. AssertionError  Has body\n"
            "   flat error\n"
            '   in "Invoices folder"\n'
            "\n"
        )

    def test_placeholders_are_logged(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        report = _write_report(tmp_path / "r.json", [{"assertion": "x", "error": {}}])

        with caplog.at_level(logging.WARNING, logger="monorun"):
            summary = summarize_failures(report, "frontend")

        assert summary.entries == (FailureEntry("x", "Unknown error", "Unknown"),)
        assert "no error message" in caplog.text
        assert "no source or parent name" in caplog.text

    def test_source_name_wins_over_parent(self, tmp_path: Path) -> None:
        report = _write_report(
            tmp_path / "r.json",
            [
                {
                    "assertion": "a",
                    "error": {"message": "m"},
                    "source": {"name": "request"},
                    "parent": {"name": "folder"},
                }
            ],
        )
        assert summarize_failures(report, "t").entries[0].source == "request"

    @pytest.mark.parametrize("failures", [None, "nope", {"a": 1}])
    def test_non_list_failures_means_zero(self, tmp_path: Path, failures: Any) -> None:  # noqa: ANN401
        report = _write_report(tmp_path / "r.json", failures)
        summary = summarize_failures(report, "t")
        assert summary.report_found
        assert summary.failure_count == 0

    def test_missing_report_is_not_an_error(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="monorun"):
            summary = summarize_failures(tmp_path / "missing.json", "backend")

        assert summary.report_found is False
        assert summary.entries == ()
        assert "not found" in caplog.text

    def test_unparseable_report_is_not_an_error(self, tmp_path: Path) -> None:
        report = tmp_path / "r.json"
        report.write_text("{truncated")
        assert summarize_failures(report, "t").report_found is False

    def test_undecodable_report_is_not_an_error(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        report = tmp_path / "r.json"
        report.write_bytes(b'{"run": {"failures": [{"assertion": "\xff"}]}}')

        with caplog.at_level(logging.WARNING, logger="monorun"):
            summary = summarize_failures(report, "t")

        assert summary.report_found is False
        assert summary.entries == ()
        assert "Unreadable JSON report" in caplog.text

    def test_empty_strings_are_kept_without_fallback(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        report = _write_report(
            tmp_path / "r.json",
            [
                {
                    "assertion": "",
                    "error": {"message": ""},
                    "source": {"name": ""},
                    "parent": {"name": "folder"},
                },
                {"assertion": "flat", "error": "", "parent": {"name": ""}},
            ],
        )

        with caplog.at_level(logging.WARNING, logger="monorun"):
            summary = summarize_failures(report, "t")

        assert summary.entries == (
            FailureEntry("", "", ""),
            FailureEntry("flat", "", ""),
        )
        assert caplog.text == ""

    def test_same_input_renders_identically(self, tmp_path: Path) -> None:
        report = _write_report(
            tmp_path / "r.json", [{"assertion": "a", "error": "e", "source": {"name": "s"}}]
        )
        assert (
            summarize_failures(report, "t").render()
            == summarize_failures(report, "t").render()
        )


class TestWriteSummary:
    def test_writes_rendered_markdown(self, tmp_path: Path) -> None:
        summary = FailureSummary("cv", (FailureEntry("a", "e", "s"),))
        path = tmp_path / "out" / "summary.md"

        assert write_summary(summary, path) is True
        assert path.read_text() == (
            '### Failed Assertions (cv)\n1. AssertionError  a\n   e\n   in "s"\n\n'
        )

    def test_skips_summary_without_report(self, tmp_path: Path) -> None:
        path = tmp_path / "summary.md"
        assert write_summary(FailureSummary("cv", report_found=False), path) is False
        assert not path.exists()
