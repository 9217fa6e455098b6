"""Protocol definitions for the execution seams of monorun.

Orchestrators depend on these protocols rather than on the concrete
CommandRunner and ProgressReporter so tests can substitute in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from contextlib import AbstractContextManager


@runtime_checkable
class CommandResultProtocol(Protocol):
    """Shape of a finished command invocation."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool: ...

    @property
    def output(self) -> str: ...


@runtime_checkable
class CommandRunnerPort(Protocol):
    """Runs one external command to completion."""

    def run(
        self,
        cmd: Sequence[str],
        *,
        capture_output: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResultProtocol: ...

    async def run_async(
        self,
        cmd: Sequence[str],
        *,
        capture_output: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResultProtocol: ...


class ProgressScopeProtocol(Protocol):
    """Handle for one in-flight progress indicator."""

    def finish(self, result: CommandResultProtocol) -> None: ...


@runtime_checkable
class ProgressReporterPort(Protocol):
    """Brackets one executor call with a progress indicator."""

    def track(
        self, label: str, capture_output: bool
    ) -> AbstractContextManager[ProgressScopeProtocol]: ...
