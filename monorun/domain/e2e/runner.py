"""External API test runner invocation and artifact layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from monorun.core.errors import IoError
from monorun.core.models import CommandDescriptor
from monorun.infra.io.console import Colors, log

if TYPE_CHECKING:
    from pathlib import Path

    from monorun.core.protocols import CommandResultProtocol, CommandRunnerPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportArtifacts:
    """Per-target report file locations.

    Names are derived from the target only, so reruns overwrite the same
    files.
    """

    report_dir: Path
    json_report: Path
    junit_report: Path
    summary: Path

    @classmethod
    def for_target(cls, report_dir: Path, target: str) -> ReportArtifacts:
        return cls(
            report_dir=report_dir,
            json_report=report_dir / f"newman-{target}.json",
            junit_report=report_dir / f"newman-{target}.xml",
            summary=report_dir / f"newman-{target}-summary.md",
        )


def newman_descriptor(
    collection_path: Path, artifacts: ReportArtifacts
) -> CommandDescriptor:
    """Runner invocation producing CLI, JSON and JUnit reports."""
    return CommandDescriptor(
        program="npx",
        args=(
            "newman",
            "run",
            str(collection_path),
            "--reporters",
            "cli,json,junit",
            "--reporter-json-export",
            str(artifacts.json_report),
            "--reporter-junit-export",
            str(artifacts.junit_report),
        ),
        label="Running newman",
    )


def run_external_suite(
    runner: CommandRunnerPort,
    collection_path: Path,
    artifacts: ReportArtifacts,
) -> CommandResultProtocol:
    """Run the collection with streamed output.

    The report directory is created first (existing directories are fine)
    and any JSON report left by an earlier run is removed, so a run that
    dies before writing its report is never summarized from stale data.
    The returned result's exit code is the verdict.

    Raises:
        IoError: If the report directory cannot be prepared.
        SpawnError: If the runner cannot be launched.
    """
    try:
        artifacts.report_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError("newman", f"cannot create {artifacts.report_dir}: {e}") from e
    try:
        artifacts.json_report.unlink(missing_ok=True)
    except OSError as e:
        raise IoError("newman", f"cannot remove {artifacts.json_report}: {e}") from e

    log("📁", f"Report directory: {artifacts.report_dir}", Colors.MUTED)
    log("📊", f"JSON report: {artifacts.json_report}", Colors.MUTED)
    log("📊", f"JUnit report: {artifacts.junit_report}", Colors.MUTED)

    descriptor = newman_descriptor(collection_path, artifacts)
    logger.debug("Running %s", descriptor.argv)
    return runner.run(descriptor.argv, capture_output=False)
