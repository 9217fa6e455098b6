"""Environment validation for the monorepo toolchains.

Checks, in order, that each required tool is on PATH and that its major
version meets the requirement. Later checks' advice assumes earlier tools
are in place, so the order is fixed. The pipeline never aborts early: it
records a deficiency per failed check, runs the tool's remediation hook, and
reports once after the last check.

Key types:
- VersionRequirement: Tool name, display name and minimum major version
- ToolCheckResult: Outcome of one check, including remediation
- EnvironmentReport: All check results and the overall deficiency flag
- EnvironmentValidator: Runs the checks sequentially
"""

from __future__ import annotations

import logging
import re
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from monorun.core.errors import IoError, SpawnError
from monorun.infra.io.console import Colors, log

if TYPE_CHECKING:
    from collections.abc import Sequence

    from monorun.core.protocols import CommandRunnerPort

logger = logging.getLogger(__name__)

_MAJOR_VERSION_PATTERN = re.compile(r"^v?(\d+)")


class Deficiency(Enum):
    """Why a tool check failed."""

    MISSING_TOOL = "missing_tool"
    VERSION_TOO_LOW = "version_too_low"
    VERSION_UNREADABLE = "version_unreadable"


@dataclass
class ToolCheckResult:
    """Outcome of checking one tool.

    Attributes:
        requirement: The requirement that was checked.
        version: Version string reported by the tool, if it could be read.
        major: Parsed major version, if it could be parsed.
        deficiency: Why the check failed, or None when it passed.
        resolved: Whether the remediation hook fixed the deficiency.
    """

    requirement: VersionRequirement
    version: str | None = None
    major: int | None = None
    deficiency: Deficiency | None = None
    resolved: bool = False

    @property
    def unresolved(self) -> bool:
        return self.deficiency is not None and not self.resolved


# Returns True when the deficiency was actually fixed
RemediationHook = Callable[[ToolCheckResult, "CommandRunnerPort"], bool]


@dataclass(frozen=True)
class VersionRequirement:
    """A tool that must be present with at least a given major version.

    Attributes:
        name: Executable name looked up on PATH.
        display_name: Name used in console output.
        required_major: Minimum acceptable major version (comparator >=).
        version_args: Arguments that make the tool print its version.
        remediation: Hook invoked when the check fails.
    """

    name: str
    display_name: str
    required_major: int
    version_args: tuple[str, ...] = ("--version",)
    remediation: RemediationHook | None = None

    def is_satisfied_by(self, major: int) -> bool:
        return major >= self.required_major


@dataclass
class EnvironmentReport:
    """Results of one validation run, in check order."""

    checks: list[ToolCheckResult] = field(default_factory=list)

    @property
    def has_deficiency(self) -> bool:
        return any(check.unresolved for check in self.checks)

    def short_summary(self) -> str:
        unresolved = [c.requirement.display_name for c in self.checks if c.unresolved]
        if not unresolved:
            return "environment ok"
        return f"unresolved: {', '.join(unresolved)}"


def parse_major_version(text: str) -> int | None:
    """Parse the leading major version from a version string.

    Tolerates a leading "v" ("v24.1.0" -> 24). Returns None when the string
    does not start with a number.
    """
    match = _MAJOR_VERSION_PATTERN.match(text.strip())
    if match is None:
        return None
    return int(match.group(1))


# =============================================================================
# Remediation hooks
# =============================================================================


def install_guidance(*lines: str) -> RemediationHook:
    """Build a hook that prints install guidance and leaves the deficiency."""

    def hook(check: ToolCheckResult, runner: CommandRunnerPort) -> bool:
        requirement = check.requirement
        log(
            "📥",
            f"Install {requirement.display_name} {requirement.required_major}",
            Colors.CYAN,
        )
        for line in lines:
            log("→", line, Colors.YELLOW)
        return False

    return hook


def npm_self_update(check: ToolCheckResult, runner: CommandRunnerPort) -> bool:
    """Update npm in place; report whether the update actually succeeded."""
    if check.deficiency is Deficiency.MISSING_TOOL:
        log("→", "npm should be installed with Node.js", Colors.YELLOW)
        return False

    log("→", "Updating npm...", Colors.MUTED)
    try:
        result = runner.run(["npm", "install", "-g", "npm@latest"], capture_output=False)
    except (SpawnError, IoError) as e:
        logger.warning("npm self-update could not run: %s", e)
        log("✗", f"Failed to update npm: {e}", Colors.RED)
        return False

    if result.ok:
        log("✓", "npm updated successfully", Colors.GREEN)
        return True
    log("✗", f"Failed to update npm (exit {result.returncode})", Colors.RED)
    return False


DEFAULT_REQUIREMENTS: tuple[VersionRequirement, ...] = (
    VersionRequirement(
        name="dotnet",
        display_name=".NET SDK",
        required_major=10,
        remediation=install_guidance(
            "Please visit https://dot.net and download the .NET 10 SDK",
            "Or use your system's package manager",
        ),
    ),
    VersionRequirement(
        name="node",
        display_name="Node.js",
        required_major=24,
        remediation=install_guidance(
            "Please visit https://nodejs.org and download Node.js 24",
            "Or use nvm: nvm install 24",
        ),
    ),
    VersionRequirement(
        name="npm",
        display_name="npm",
        required_major=11,
        remediation=npm_self_update,
    ),
)


class EnvironmentValidator:
    """Runs version-gated capability checks sequentially."""

    def __init__(
        self,
        runner: CommandRunnerPort,
        requirements: Sequence[VersionRequirement] = DEFAULT_REQUIREMENTS,
        which: Callable[[str], str | None] = shutil.which,
    ):
        self.runner = runner
        self.requirements = tuple(requirements)
        self._which = which

    def validate(self) -> bool:
        """Run every check. Returns True if any deficiency is unresolved."""
        return self.run().has_deficiency

    def run(self) -> EnvironmentReport:
        report = EnvironmentReport()
        for requirement in self.requirements:
            log("🔍", f"Checking {requirement.display_name}...", Colors.BOLD)
            report.checks.append(self.check(requirement))
        logger.debug("Environment validation: %s", report.short_summary())
        return report

    def check(self, requirement: VersionRequirement) -> ToolCheckResult:
        """Check one requirement and run its remediation hook on failure."""
        result = ToolCheckResult(requirement=requirement)

        if self._which(requirement.name) is None:
            log("✗", f"{requirement.display_name} is not installed", Colors.RED)
            log("→", self._required_text(requirement), Colors.YELLOW)
            result.deficiency = Deficiency.MISSING_TOOL
            return self._remediate(result)

        result.version = self._query_version(requirement)
        if result.version is not None:
            result.major = parse_major_version(result.version)

        if result.major is None:
            log("✗", f"{requirement.display_name} version check failed", Colors.RED)
            result.deficiency = Deficiency.VERSION_UNREADABLE
            return self._remediate(result)

        if not requirement.is_satisfied_by(result.major):
            log("⚠", f"Found {requirement.display_name} {result.version}", Colors.YELLOW)
            log("→", self._required_text(requirement), Colors.YELLOW)
            result.deficiency = Deficiency.VERSION_TOO_LOW
            return self._remediate(result)

        log(
            "✓",
            f"{requirement.display_name} {result.version} is installed",
            Colors.GREEN,
        )
        return result

    def _query_version(self, requirement: VersionRequirement) -> str | None:
        try:
            output = self.runner.run([requirement.name, *requirement.version_args])
        except (SpawnError, IoError) as e:
            logger.warning("Version query for %s failed: %s", requirement.name, e)
            return None
        if not output.ok:
            logger.debug(
                "Version query for %s exited %d", requirement.name, output.returncode
            )
            return None
        lines = output.stdout.strip().splitlines()
        return lines[0].strip() if lines else None

    def _remediate(self, result: ToolCheckResult) -> ToolCheckResult:
        hook = result.requirement.remediation
        if hook is not None:
            result.resolved = hook(result, self.runner)
        return result

    @staticmethod
    def _required_text(requirement: VersionRequirement) -> str:
        return (
            f"Required: {requirement.display_name} "
            f"{requirement.required_major}.x or higher"
        )
