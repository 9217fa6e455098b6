#!/usr/bin/env python3
"""
monorun CLI: monorepo task runner.

Usage:
    monorun format [all|packages|website|cv|api]
    monorun lint [all|packages|website|cv]
    monorun test-e2e [all|frontend|backend]
    monorun setup
    monorun generate [--env] [--acks] [--i18n] [--gql]
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Never

import typer

from monorun.core.errors import MonorunError
from monorun.domain.generators import GeneratorTask
from monorun.domain.targets import ALL_TARGETS, ToolCategory
from monorun.infra.io.config import MonorunConfig, env_flag
from monorun.infra.io.console import (
    Colors,
    is_verbose_enabled,
    log,
    print_banner,
    set_verbose,
)
from monorun.infra.io.debug_log import (
    configure_console_logging,
    configure_debug_logging,
)
from monorun.infra.tools.env import load_env
from monorun.orchestration.factory import (
    create_e2e_workflow,
    create_environment_validator,
    create_generate_workflow,
    create_phased_orchestrator,
)

if TYPE_CHECKING:
    from monorun.core.models import OrchestrationOutcome

logger = logging.getLogger(__name__)

# Bootstrap state: tracks whether bootstrap() has been called
_bootstrapped = False


def bootstrap() -> None:
    """Initialize environment.

    Idempotent: calling it more than once has no additional effect.

    Side effects:
        - Loads ~/.config/monorun/.env, then <repo>/.env without overriding
          variables that are already set
    """
    global _bootstrapped

    if _bootstrapped:
        return

    repo_root = os.environ.get("MONORUN_REPO_ROOT")
    load_env(Path(repo_root) if repo_root else Path.cwd())

    _bootstrapped = True


app = typer.Typer(
    name="monorun",
    help="Format, lint, test and set up the monorepo",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug output",
        ),
    ] = False,
) -> None:
    """Monorepo task runner."""
    set_verbose(verbose or env_flag(os.environ.get("MONORUN_VERBOSE")))


def _fail(message: str) -> Never:
    log("✗", message, Colors.RED)
    raise typer.Exit(1)


def _load_config() -> MonorunConfig:
    """Read configuration once and set up logging for this invocation."""
    bootstrap()
    try:
        config = MonorunConfig.from_env()
    except MonorunError as e:
        _fail(str(e))

    if is_verbose_enabled() and not config.verbose:
        config = replace(config, verbose=True)
    set_verbose(config.verbose)
    configure_console_logging(config.verbose)
    configure_debug_logging(config.debug_log_path)
    return config


def _run_phased(category: ToolCategory, target: str) -> None:
    config = _load_config()
    print_banner(f"monorun {category.value}: {target}")
    try:
        orchestrator = create_phased_orchestrator(category, config)
        outcome: OrchestrationOutcome = asyncio.run(orchestrator.run(target))
    except MonorunError as e:
        _fail(str(e))

    logger.debug("%s %s: %s", category.value, target, outcome.short_summary())
    if not outcome.passed:
        raise typer.Exit(1)


TargetArgument = Annotated[
    str,
    typer.Argument(help="Target name, or 'all' for every target"),
]


@app.command(name="format")
def format_(target: TargetArgument = ALL_TARGETS) -> None:
    """Check formatting and fix targets that are not clean."""
    _run_phased(ToolCategory.FORMAT, target)


@app.command()
def lint(target: TargetArgument = ALL_TARGETS) -> None:
    """Lint targets and apply fixes to those with problems."""
    _run_phased(ToolCategory.LINT, target)


@app.command(name="test-e2e")
def test_e2e(
    target: Annotated[
        str,
        typer.Argument(help="frontend, backend or all"),
    ],
) -> None:
    """Run the API test collections with newman.

    Requires E2E_TEST_AUTH_TOKEN. Reports land in NEWMAN_REPORT_DIR
    (default: e2e-logs).
    """
    config = _load_config()
    print_banner("E2E Test Runner")
    try:
        results = create_e2e_workflow(config).run(target)
    except MonorunError as e:
        _fail(str(e))

    if not all(result.passed for result in results):
        _fail("E2E tests failed")
    log("🎉", "All E2E tests completed successfully!", Colors.GREEN)


@app.command()
def setup() -> None:
    """Check that the required toolchains are installed."""
    config = _load_config()
    print_banner("Environment Setup")
    validator = create_environment_validator(config)
    if validator.validate():
        _fail("Environment setup incomplete. Fix the issues above and rerun.")

    log("✅", "Environment is ready", Colors.GREEN)
    print(f"\n{Colors.MUTED}📝 Next steps:")
    print("  1. Restart your terminal or IDE if you installed new software")
    print("  2. Run 'npm run dev' to start development")
    print(f"  3. Check the README.md for more information{Colors.RESET}\n")


@app.command()
def generate(
    env: Annotated[bool, typer.Option("--env", help="Environment configuration")] = False,
    acks: Annotated[bool, typer.Option("--acks", help="Acknowledgements")] = False,
    i18n: Annotated[bool, typer.Option("--i18n", help="i18n assets")] = False,
    gql: Annotated[bool, typer.Option("--gql", help="GraphQL types")] = False,
) -> None:
    """Run code generators (in env, acks, i18n, gql order)."""
    config = _load_config()
    print_banner("Generation Orchestrator")
    flags = {
        GeneratorTask.ENV: env,
        GeneratorTask.ACKS: acks,
        GeneratorTask.I18N: i18n,
        GeneratorTask.GQL: gql,
    }
    try:
        result = create_generate_workflow(config).run(
            task for task, enabled in flags.items() if enabled
        )
    except MonorunError as e:
        _fail(str(e))

    if not result.passed:
        raise typer.Exit(1)
