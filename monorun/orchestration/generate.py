"""Sequential code generation workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from monorun.domain.generators import GeneratorTask, ordered_tasks
from monorun.infra.io.console import Colors, log

if TYPE_CHECKING:
    from collections.abc import Iterable

    from monorun.core.protocols import CommandRunnerPort

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Tasks that completed, plus the task that failed (if any)."""

    completed: list[GeneratorTask] = field(default_factory=list)
    failed: GeneratorTask | None = None
    returncode: int = 0

    @property
    def passed(self) -> bool:
        return self.failed is None


class GenerateWorkflow:
    """Runs selected generators one at a time in fixed order."""

    def __init__(self, runner: CommandRunnerPort, verbose: bool = False):
        self.runner = runner
        self.verbose = verbose

    def run(self, selected: Iterable[GeneratorTask]) -> GenerateResult:
        """Run the selected generators, stopping at the first failure.

        Selecting nothing is a successful no-op.
        """
        tasks = ordered_tasks(set(selected))
        result = GenerateResult()
        if not tasks:
            log("⚠", "No generation tasks selected. Nothing to do.", Colors.YELLOW)
            return result

        for task in tasks:
            log("🚀", f"Running {task.description}...", Colors.CYAN)
            descriptor = task.descriptor(self.verbose)
            outcome = self.runner.run(descriptor.argv, capture_output=False)
            if not outcome.ok:
                log(
                    "✗",
                    f"{task.value} generator failed (exit {outcome.returncode})",
                    Colors.RED,
                )
                result.failed = task
                result.returncode = outcome.returncode
                return result
            result.completed.append(task)

        log("✓", f"Completed {len(result.completed)} generation task(s)", Colors.GREEN)
        logger.debug("Generators completed: %s", [t.value for t in result.completed])
        return result
