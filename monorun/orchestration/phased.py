"""Phased check-then-remediate orchestration across targets.

Phase 1 runs every target's check command concurrently. Phase 2 runs the
fix command concurrently for only the targets whose check did not pass.
Each phase launches all of its tasks before awaiting any of them and joins
every task before the outcome is decided: a failing or erroring target never
cancels its siblings.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from monorun.core.models import (
    OrchestrationOutcome,
    PhaseResult,
    TargetResult,
    TargetStatus,
)
from monorun.domain.targets import ALL_TARGETS
from monorun.infra.io.console import Colors, log, log_verbose

if TYPE_CHECKING:
    from collections.abc import Sequence

    from monorun.core.models import CommandDescriptor
    from monorun.core.protocols import CommandRunnerPort, ProgressReporterPort
    from monorun.domain.targets import Target, TargetRegistry

logger = logging.getLogger(__name__)

CHECK_PHASE = "check"
FIX_PHASE = "fix"


class PhasedOrchestrator:
    """Drives the check/fix phases for one tool category."""

    def __init__(
        self,
        registry: TargetRegistry,
        runner: CommandRunnerPort,
        reporter: ProgressReporterPort,
    ):
        self.registry = registry
        self.runner = runner
        self.reporter = reporter

    async def run(self, target_name: str) -> OrchestrationOutcome:
        """Run for a target name or the "all" sentinel.

        Raises:
            InvalidTargetError: Unknown target name (nothing is spawned).
            UnmappedTargetError: Target has no commands in this category.
        """
        if target_name == ALL_TARGETS:
            return await self.run_phased(self.registry.targets)
        target = self.registry.resolve(target_name)
        return await self.run_single(target)

    async def run_phased(self, targets: Sequence[Target]) -> OrchestrationOutcome:
        """Check all targets concurrently, then fix only those that failed.

        Every spec is resolved before any task starts, so dispatch-time
        errors surface before a single process is spawned.
        """
        capture = len(targets) > 1
        specs = [
            self.registry.spec_for(target, capture_output=capture)
            for target in targets
        ]

        log(
            "🧵",
            f"Phase 1: Checking {len(specs)} target(s) in parallel...",
            Colors.MAGENTA,
        )
        check = await self._run_phase(
            CHECK_PHASE, [(spec.target.value, spec.check) for spec in specs], capture
        )

        failed = set(check.failed_targets)
        to_fix = [spec for spec in specs if spec.target.value in failed]
        if not to_fix:
            log("✓", "All targets already clean", Colors.GREEN)
            return OrchestrationOutcome(check=check)

        log(
            "🧵",
            f"Phase 2: Remediating {len(to_fix)} target(s) in parallel...",
            Colors.MAGENTA,
        )
        fix = await self._run_phase(
            FIX_PHASE, [(spec.target.value, spec.fix) for spec in to_fix], capture
        )

        outcome = OrchestrationOutcome(check=check, remediate=fix)
        if outcome.passed:
            log("✓", f"Remediated {len(outcome.remediated)} target(s)", Colors.GREEN)
        else:
            log(
                "⚠",
                f"{outcome.failed_count} target(s) still failing after remediation",
                Colors.YELLOW,
            )
        return outcome

    async def run_single(self, target: Target) -> OrchestrationOutcome:
        """Check one target with full output and fix it only if needed.

        Launch failures propagate to the caller unchanged.
        """
        spec = self.registry.spec_for(target, capture_output=False)
        check_result = await self._invoke(target.value, spec.check, False)
        check = PhaseResult(CHECK_PHASE, {target.value: check_result})
        if check_result.passed:
            return OrchestrationOutcome(check=check)

        fix_result = await self._invoke(target.value, spec.fix, False)
        return OrchestrationOutcome(
            check=check, remediate=PhaseResult(FIX_PHASE, {target.value: fix_result})
        )

    async def _run_phase(
        self,
        name: str,
        jobs: list[tuple[str, CommandDescriptor]],
        capture_output: bool,
    ) -> PhaseResult:
        tasks = [
            asyncio.create_task(self._invoke(target, descriptor, capture_output))
            for target, descriptor in jobs
        ]
        joined = await asyncio.gather(*tasks, return_exceptions=True)

        results: dict[str, TargetResult] = {}
        for (target, _), item in zip(jobs, joined, strict=True):
            if isinstance(item, BaseException):
                logger.warning("Phase %s: target %s errored: %s", name, target, item)
                results[target] = TargetResult(
                    target=target,
                    status=TargetStatus.EXECUTION_ERROR,
                    error=str(item),
                )
            else:
                results[target] = item
        phase = PhaseResult(name, results)
        for target, result in results.items():
            log_verbose("•", f"{name}: {result.status.value}", target=target)
        logger.debug("Phase %s finished: failed=%s", name, phase.failed_targets)
        return phase

    async def _invoke(
        self, target: str, descriptor: CommandDescriptor, capture_output: bool
    ) -> TargetResult:
        with self.reporter.track(descriptor.display_label, capture_output) as scope:
            result = await self.runner.run_async(
                descriptor.argv, capture_output=capture_output
            )
            scope.finish(result)
        status = TargetStatus.PASSED if result.ok else TargetStatus.FAILED
        return TargetResult(
            target=target,
            status=status,
            returncode=result.returncode,
            output=result.output,
        )
