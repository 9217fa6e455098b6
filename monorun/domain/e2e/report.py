"""Failure summary extraction from the runner's JSON report.

The runner writes a JSON report whose `run.failures` list holds one record
per failed assertion. This module turns those records into a deterministic
markdown summary. Summary generation is best-effort: a missing, undecodable
or unparseable report yields an empty summary with `report_found=False` and
a logged warning, and never raises to the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from monorun.infra.io.console import Colors, log

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"
UNKNOWN_SOURCE = "Unknown"
UNKNOWN_ASSERTION = "Unknown"
NO_FAILURES_LINE = "No failed assertions."


@dataclass(frozen=True)
class FailureEntry:
    """One failed assertion, with fallbacks already applied."""

    assertion: str
    error: str
    source: str

    def render(self, index: int) -> str:
        return (
            f"{index}. AssertionError  {self.assertion}\n"
            f"   {self.error}\n"
            f'   in "{self.source}"\n\n'
        )


@dataclass(frozen=True)
class FailureSummary:
    """Ordered failed assertions for one target.

    Attributes:
        target: Target name used in the heading.
        entries: Failures in report order.
        report_found: False when the JSON report was missing or unreadable;
            such a summary is never written to disk.
    """

    target: str
    entries: tuple[FailureEntry, ...] = field(default_factory=tuple)
    report_found: bool = True

    @property
    def failure_count(self) -> int:
        return len(self.entries)

    def render(self) -> str:
        """Render the markdown summary.

        Identical entries always render to identical text.
        """
        parts = [f"### Failed Assertions ({self.target})\n"]
        if not self.entries:
            parts.append(f"{NO_FAILURES_LINE}\n")
        for index, entry in enumerate(self.entries, start=1):
            parts.append(entry.render(index))
        return "".join(parts)


def _nested_name(record: dict[str, Any], key: str) -> str | None:
    value = record.get(key)
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, str):
            return name
    return None


def _resolve_error(record: dict[str, Any]) -> str | None:
    error = record.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str):
            return message
        return None
    if isinstance(error, str):
        return error
    return None


def extract_entry(record: Any, index: int) -> FailureEntry:
    """Build a FailureEntry from one raw `run.failures` record.

    Fallbacks: error is `error.message`, then a string `error`, then a
    placeholder. Source is `source.name`, then `parent.name`, then a
    placeholder. A present but empty string is kept as is. Every placeholder
    substitution is logged as a warning.
    """
    if not isinstance(record, dict):
        record = {}

    assertion = record.get("assertion")
    if not isinstance(assertion, str):
        logger.warning("Failure #%d has no assertion text", index)
        assertion = UNKNOWN_ASSERTION

    error = _resolve_error(record)
    if error is None:
        logger.warning("Failure #%d has no error message", index)
        error = UNKNOWN_ERROR

    source = _nested_name(record, "source")
    if source is None:
        source = _nested_name(record, "parent")
    if source is None:
        logger.warning("Failure #%d has no source or parent name", index)
        source = UNKNOWN_SOURCE

    return FailureEntry(assertion=assertion, error=error, source=source)


def summarize_failures(report_path: Path, target: str) -> FailureSummary:
    """Read the runner's JSON report and extract its failures.

    A missing `run.failures` list (or a non-list value) means zero failures.
    """
    try:
        data = json.loads(report_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("JSON report not found: %s", report_path)
        log("⚠", f"JSON report not found: {report_path}", Colors.YELLOW)
        return FailureSummary(target=target, report_found=False)
    except (OSError, ValueError) as e:
        logger.warning("Unreadable JSON report %s: %s", report_path, e)
        log("⚠", f"Could not read JSON report: {report_path}", Colors.YELLOW)
        return FailureSummary(target=target, report_found=False)

    run = data.get("run") if isinstance(data, dict) else None
    failures = run.get("failures") if isinstance(run, dict) else None
    if not isinstance(failures, list):
        failures = []

    entries = tuple(
        extract_entry(record, index) for index, record in enumerate(failures, start=1)
    )
    return FailureSummary(target=target, entries=entries)


def write_summary(summary: FailureSummary, path: Path) -> bool:
    """Write the rendered summary. Returns False if nothing was written.

    Only summaries backed by a real report are written. Write failures are
    logged, not raised.
    """
    if not summary.report_found:
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(summary.render(), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not write summary %s: %s", path, e)
        log("✗", f"Failed to write summary: {path}", Colors.RED)
        return False

    if summary.failure_count:
        log(
            "⚠",
            f"{summary.failure_count} failed assertion(s) for {summary.target}",
            Colors.YELLOW,
        )
    else:
        log("✓", f"No failed assertions for {summary.target}", Colors.GREEN)
    log("📄", f"Summary written to: {path}", Colors.MUTED)
    return True
