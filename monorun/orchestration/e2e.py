"""API end-to-end test workflow.

For each target: inject the auth token into its collection, run the
external runner with streamed output, then always attempt the failure
summary. The runner's exit code decides the verdict; the summary step can
neither turn a failure into a pass nor the reverse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from monorun.core.errors import InvalidTargetError
from monorun.domain.e2e.collection import inject_auth_token
from monorun.domain.e2e.report import (
    FailureSummary,
    summarize_failures,
    write_summary,
)
from monorun.domain.e2e.runner import ReportArtifacts, run_external_suite
from monorun.domain.targets import ALL_TARGETS
from monorun.infra.io.console import Colors, log, print_banner

if TYPE_CHECKING:
    from monorun.core.protocols import CommandRunnerPort
    from monorun.infra.io.config import MonorunConfig

logger = logging.getLogger(__name__)

# Collection file per target, relative to the repository root
E2E_COLLECTIONS: dict[str, str] = {
    "frontend": "sites/arolariu.ro/postman-collection.json",
    "backend": "sites/api.arolariu.ro/postman-collection.json",
}


@dataclass(frozen=True)
class E2EResult:
    """Outcome of one target's API test run."""

    target: str
    returncode: int
    summary: FailureSummary
    artifacts: ReportArtifacts

    @property
    def passed(self) -> bool:
        return self.returncode == 0


class E2EWorkflow:
    """Runs API test collections for one target or all of them."""

    def __init__(self, config: MonorunConfig, runner: CommandRunnerPort):
        self.config = config
        self.runner = runner

    @property
    def valid_names(self) -> list[str]:
        return [ALL_TARGETS, *E2E_COLLECTIONS]

    def resolve(self, name: str) -> list[str]:
        """Targets selected by `name`, in execution order.

        Raises:
            InvalidTargetError: If the name is not a known target.
        """
        if name == ALL_TARGETS:
            return list(E2E_COLLECTIONS)
        if name not in E2E_COLLECTIONS:
            raise InvalidTargetError(name, self.valid_names)
        return [name]

    def run(self, name: str) -> list[E2EResult]:
        """Run the selected targets sequentially, stopping at the first failure.

        Raises:
            InvalidTargetError: Unknown target name.
            ConfigurationError: E2E_TEST_AUTH_TOKEN is not set. Raised before
                any collection is touched.
            CollectionParseError: A collection is malformed. The runner is
                not started for that target.
        """
        targets = self.resolve(name)
        token = self.config.require_auth_token()

        results: list[E2EResult] = []
        for index, target in enumerate(targets):
            if index:
                print(f"\n{Colors.GRAY}{'─' * 49}{Colors.RESET}\n")
            result = self.run_target(target, token)
            results.append(result)
            if not result.passed:
                logger.info("Stopping after failed target %s", target)
                break
        return results

    def collection_path(self, target: str) -> Path:
        return self.config.repo_root / E2E_COLLECTIONS[target]

    def run_target(self, target: str, token: str) -> E2EResult:
        print_banner(f"E2E Testing: {target}")
        collection = self.collection_path(target)
        log("📦", f"Test collection: {target}", Colors.CYAN)

        inject_auth_token(collection, token)

        artifacts = ReportArtifacts.for_target(self.config.report_dir, target)
        log("🧪", f"Running newman test collection for: {target}", Colors.CYAN)
        try:
            result = run_external_suite(self.runner, collection, artifacts)
        finally:
            log("📝", "Generating assertion summary...", Colors.CYAN)
            summary = summarize_failures(artifacts.json_report, target)
            write_summary(summary, artifacts.summary)

        if result.ok:
            log("✓", f"Newman tests passed for {target}", Colors.GREEN)
        else:
            log(
                "✗",
                f"Newman tests failed for {target} (exit {result.returncode})",
                Colors.RED,
            )
        logger.debug(
            "E2E %s: exit=%d failures=%d report_found=%s",
            target,
            result.returncode,
            summary.failure_count,
            summary.report_found,
        )
        return E2EResult(
            target=target,
            returncode=result.returncode,
            summary=summary,
            artifacts=artifacts,
        )
