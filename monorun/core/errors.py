"""Error taxonomy for monorun.

Every error the core raises derives from MonorunError so the CLI can turn
any of them into a one-line diagnostic and a non-zero exit code.

Environment deficiencies (missing tool, version too low) are not exceptions:
they are accumulated by the environment validator. A missing test-runner
report is not an exception either: summary generation degrades to an empty
summary and logs a warning.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class MonorunError(Exception):
    """Base class for all monorun errors."""


class InvalidTargetError(MonorunError):
    """Raised when a target name is not known to a registry."""

    def __init__(self, name: str, valid: Sequence[str]) -> None:
        self.name = name
        self.valid = tuple(valid)
        super().__init__(
            f'Invalid target: "{name}" (valid targets: {", ".join(self.valid)})'
        )


class UnmappedTargetError(MonorunError):
    """Raised when a known target has no command set for a tool category."""

    def __init__(self, target: str, category: str) -> None:
        self.target = target
        self.category = category
        super().__init__(f"No {category} mapping found for target: {target}")


class ToolConfigNotFoundError(MonorunError):
    """Raised when a tool's configuration file cannot be located."""

    def __init__(self, tool: str, candidates: Sequence[str]) -> None:
        self.tool = tool
        self.candidates = tuple(candidates)
        super().__init__(
            f"Could not find {tool} configuration file "
            f"(looked for: {', '.join(self.candidates)})"
        )


class SpawnError(MonorunError):
    """Raised when an external program cannot be launched."""

    def __init__(self, program: str, reason: str) -> None:
        self.program = program
        self.reason = reason
        super().__init__(f"Failed to launch {program}: {reason}")


class IoError(MonorunError):
    """Raised when a child process's output streams cannot be read."""

    def __init__(self, program: str, reason: str) -> None:
        self.program = program
        self.reason = reason
        super().__init__(f"Failed to read output of {program}: {reason}")


class CollectionParseError(MonorunError):
    """Raised when a test collection document cannot be read or parsed.

    Fatal: the external runner must never run against an un-mutated or
    malformed collection.
    """

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f" {path}" if path is not None else ""
        super().__init__(f"Could not load collection{where}: {reason}")


class ConfigurationError(MonorunError):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        message = "Configuration validation failed:\n" + "\n".join(
            f"  - {e}" for e in errors
        )
        super().__init__(message)
