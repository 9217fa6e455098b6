"""Shared domain-agnostic dataclasses for monorun.

Types:
- CommandDescriptor: An external program invocation (argv + display label)
- TargetStatus: Per-target outcome of one phase
- TargetResult: Result of running one descriptor for one target
- PhaseResult: All per-target results of one phase
- OrchestrationOutcome: Check phase plus optional remediation phase
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class CommandDescriptor:
    """An external program invocation.

    Attributes:
        program: Executable name or path, resolved through PATH.
        args: Ordered argument vector (never shell-interpreted).
        label: Human-readable label shown by the progress reporter.
    """

    program: str
    args: tuple[str, ...] = ()
    label: str = ""

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    @property
    def display_label(self) -> str:
        return self.label or " ".join(self.argv)


class TargetStatus(Enum):
    """Outcome of a single target within a phase."""

    PASSED = "passed"
    FAILED = "failed"
    EXECUTION_ERROR = "execution_error"


@dataclass(frozen=True)
class TargetResult:
    """Result of one target's invocation within a phase.

    Attributes:
        target: Target name.
        status: Passed, failed (non-zero exit) or execution error (the task
            itself raised, e.g. the program could not be launched).
        returncode: Exit code of the process (None for execution errors).
        output: Captured output (empty when streamed).
        error: Exception message for execution errors.
    """

    target: str
    status: TargetStatus
    returncode: int | None = None
    output: str = ""
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.status is TargetStatus.PASSED


@dataclass(frozen=True)
class PhaseResult:
    """Per-target results of one synchronized wave of invocations.

    `results` preserves the order in which targets were launched, which is
    the registry order, regardless of completion order.
    """

    name: str
    results: dict[str, TargetResult] = field(default_factory=dict)

    @property
    def failed_targets(self) -> list[str]:
        return [name for name, result in self.results.items() if not result.passed]

    @property
    def passed(self) -> bool:
        return not self.failed_targets


@dataclass(frozen=True)
class OrchestrationOutcome:
    """Final outcome of a phased run.

    Attributes:
        check: Phase 1 results.
        remediate: Phase 2 results, or None when phase 2 never ran because
            every check passed.
    """

    check: PhaseResult
    remediate: PhaseResult | None = None

    @property
    def remediated(self) -> list[str]:
        if self.remediate is None:
            return []
        return list(self.remediate.results)

    @property
    def failed_count(self) -> int:
        if self.remediate is None:
            return 0
        return len(self.remediate.failed_targets)

    @property
    def passed(self) -> bool:
        return self.failed_count == 0

    def short_summary(self) -> str:
        """One-line summary for logs."""
        if self.remediate is None:
            return "all targets passed checks"
        if self.passed:
            return f"remediated {len(self.remediated)} target(s)"
        return f"{self.failed_count} target(s) failed remediation"
