"""Configuration dataclass for monorun.

Provides MonorunConfig, resolved once at process start and passed to the
components that need it. Programmatic users (and tests) construct it
directly; the CLI uses from_env().

Environment Variables:
    MONORUN_REPO_ROOT: Monorepo root all commands run in (default: cwd)
    MONORUN_VERBOSE: Verbose output when truthy (default: off)
    CI: Plain, non-animated output when truthy (default: off)
    E2E_TEST_AUTH_TOKEN: Token injected into API test collections
        (required by test-e2e)
    NEWMAN_REPORT_DIR: Report directory for API test artifacts
        (default: e2e-logs, relative to the repo root)
    MONORUN_DEBUG_LOG: Path of a DEBUG-level log file (default: none)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from monorun.core.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_REPORT_DIR = "e2e-logs"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def env_flag(value: str | None) -> bool:
    """Interpret an environment variable as a boolean flag."""
    return value is not None and value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class MonorunConfig:
    """Centralized configuration for monorun commands.

    Attributes:
        repo_root: Monorepo root. Every external command runs here.
            Env: MONORUN_REPO_ROOT (default: current directory)
        verbose: Show full tool output and debug-level console lines.
            Env: MONORUN_VERBOSE
        ci: Running under CI. Disables the animated spinner.
            Env: CI
        e2e_auth_token: Auth token injected into API test collections.
            Env: E2E_TEST_AUTH_TOKEN (empty string treated as unset)
        report_dir: Directory for API test artifacts. Relative values are
            resolved against repo_root.
            Env: NEWMAN_REPORT_DIR (default: e2e-logs)
        debug_log_path: Optional DEBUG-level log file.
            Env: MONORUN_DEBUG_LOG

    Example:
        config = MonorunConfig(repo_root=Path("/src/monorepo"), verbose=True)
        config = MonorunConfig.from_env()
    """

    repo_root: Path = field(default_factory=Path.cwd)
    verbose: bool = False
    ci: bool = False
    e2e_auth_token: str | None = None
    report_dir: Path = field(default_factory=lambda: Path(DEFAULT_REPORT_DIR))
    debug_log_path: Path | None = None

    def __post_init__(self) -> None:
        """Anchor a relative report directory at the repository root."""
        if not self.report_dir.is_absolute():
            object.__setattr__(self, "report_dir", self.repo_root / self.report_dir)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, *, validate: bool = True
    ) -> MonorunConfig:
        """Create MonorunConfig from environment variables.

        Args:
            environ: Mapping to read from. Uses os.environ if None.
            validate: If True (default), raise ConfigurationError on any
                validation error.

        Raises:
            ConfigurationError: If validate=True and configuration is invalid.
        """
        if environ is None:
            environ = os.environ

        repo_root_value = environ.get("MONORUN_REPO_ROOT")
        repo_root = Path(repo_root_value) if repo_root_value else Path.cwd()
        debug_log = environ.get("MONORUN_DEBUG_LOG") or None

        config = cls(
            repo_root=repo_root,
            verbose=env_flag(environ.get("MONORUN_VERBOSE")),
            ci=env_flag(environ.get("CI")),
            e2e_auth_token=environ.get("E2E_TEST_AUTH_TOKEN") or None,
            report_dir=Path(environ.get("NEWMAN_REPORT_DIR") or DEFAULT_REPORT_DIR),
            debug_log_path=Path(debug_log) if debug_log else None,
        )

        if validate:
            errors = config.validate()
            if errors:
                raise ConfigurationError(errors)

        return config

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Checks:
            - repo_root exists and is a directory
            - report_dir is not an existing regular file
            - debug log parent directory exists
        """
        errors: list[str] = []

        if not self.repo_root.is_dir():
            errors.append(f"repo_root is not a directory: {self.repo_root}")
        if self.report_dir.exists() and not self.report_dir.is_dir():
            errors.append(f"report_dir exists and is not a directory: {self.report_dir}")
        if self.debug_log_path is not None and not self.debug_log_path.parent.exists():
            errors.append(
                f"debug log parent directory does not exist: {self.debug_log_path.parent}"
            )

        return errors

    def require_auth_token(self) -> str:
        """Return the E2E auth token, failing fast when it is missing.

        Raises:
            ConfigurationError: If E2E_TEST_AUTH_TOKEN is unset or empty.
        """
        if not self.e2e_auth_token:
            raise ConfigurationError(
                ["E2E_TEST_AUTH_TOKEN environment variable is not set"]
            )
        return self.e2e_auth_token
