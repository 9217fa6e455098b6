"""Factory functions wiring workflows to their dependencies.

Usage:
    config = MonorunConfig.from_env()
    orchestrator = create_phased_orchestrator(ToolCategory.FORMAT, config)

    # With in-memory fakes for testing
    deps = WorkflowDependencies(runner=fake_runner, reporter=fake_reporter)
    orchestrator = create_phased_orchestrator(ToolCategory.LINT, config, deps)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from monorun.domain.environment import EnvironmentValidator
from monorun.domain.targets import (
    ToolCategory,
    build_format_registry,
    build_lint_registry,
)
from monorun.infra.io.progress import ProgressReporter
from monorun.infra.tools.command_runner import CommandRunner
from monorun.orchestration.e2e import E2EWorkflow
from monorun.orchestration.generate import GenerateWorkflow
from monorun.orchestration.phased import PhasedOrchestrator

if TYPE_CHECKING:
    from monorun.core.protocols import CommandRunnerPort, ProgressReporterPort
    from monorun.domain.targets import TargetRegistry
    from monorun.infra.io.config import MonorunConfig


@dataclass
class WorkflowDependencies:
    """Protocol implementations; None means build the real one from config."""

    runner: CommandRunnerPort | None = None
    reporter: ProgressReporterPort | None = None


def _runner(config: MonorunConfig, deps: WorkflowDependencies | None) -> CommandRunnerPort:
    if deps is not None and deps.runner is not None:
        return deps.runner
    return CommandRunner(cwd=config.repo_root)


def _reporter(
    config: MonorunConfig, deps: WorkflowDependencies | None
) -> ProgressReporterPort:
    if deps is not None and deps.reporter is not None:
        return deps.reporter
    return ProgressReporter(animate=not config.ci)


def create_registry(category: ToolCategory, config: MonorunConfig) -> TargetRegistry:
    match category:
        case ToolCategory.FORMAT:
            return build_format_registry(config.repo_root)
        case ToolCategory.LINT:
            return build_lint_registry()
        case _:
            raise ValueError(f"Unknown tool category: {category}")


def create_phased_orchestrator(
    category: ToolCategory,
    config: MonorunConfig,
    deps: WorkflowDependencies | None = None,
) -> PhasedOrchestrator:
    return PhasedOrchestrator(
        registry=create_registry(category, config),
        runner=_runner(config, deps),
        reporter=_reporter(config, deps),
    )


def create_e2e_workflow(
    config: MonorunConfig, deps: WorkflowDependencies | None = None
) -> E2EWorkflow:
    return E2EWorkflow(config, _runner(config, deps))


def create_generate_workflow(
    config: MonorunConfig, deps: WorkflowDependencies | None = None
) -> GenerateWorkflow:
    return GenerateWorkflow(_runner(config, deps), verbose=config.verbose)


def create_environment_validator(
    config: MonorunConfig, deps: WorkflowDependencies | None = None
) -> EnvironmentValidator:
    return EnvironmentValidator(_runner(config, deps))
