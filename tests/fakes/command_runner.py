"""Fake CommandRunner with scripted results.

Responses are registered with on(): a rule matches a command when every one
of its tokens appears in the argv. Later rules win over earlier ones.
Commands matching no rule succeed with empty output, unless the fake was
built with strict=True, in which case they fail the test. A rule may carry
an effect callback that runs with the argv before the result is returned,
for commands whose files the code under test reads afterwards.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from monorun.infra.tools.command_runner import CommandResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence


@dataclass
class RecordedCall:
    """One invocation seen by the fake."""

    argv: list[str]
    capture_output: bool
    is_async: bool
    env: dict[str, str] | None = None


@dataclass
class _Rule:
    tokens: tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    raises: BaseException | None = None
    effect: Callable[[list[str]], object] | None = None

    def matches(self, argv: Sequence[str]) -> bool:
        return all(token in argv for token in self.tokens)


@dataclass
class FakeCommandRunner:
    """Implements CommandRunnerPort without spawning processes.

    Attributes:
        calls: Every invocation, in start order.
        max_in_flight: Highest number of concurrent run_async calls observed.
        gate: When set, run_async waits on it before returning, which lets a
            test observe how many commands were started before any finished.
    """

    strict: bool = False
    calls: list[RecordedCall] = field(default_factory=list)
    max_in_flight: int = 0
    gate: asyncio.Event | None = None
    _rules: list[_Rule] = field(default_factory=list)
    _in_flight: int = 0

    def on(
        self,
        *tokens: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        raises: BaseException | None = None,
        effect: Callable[[list[str]], object] | None = None,
    ) -> FakeCommandRunner:
        self._rules.append(_Rule(tokens, returncode, stdout, stderr, raises, effect))
        return self

    @property
    def argvs(self) -> list[list[str]]:
        return [call.argv for call in self.calls]

    def calls_with(self, *tokens: str) -> list[RecordedCall]:
        return [c for c in self.calls if all(t in c.argv for t in tokens)]

    def _respond(self, argv: list[str]) -> CommandResult:
        for rule in reversed(self._rules):
            if rule.matches(argv):
                if rule.effect is not None:
                    rule.effect(argv)
                if rule.raises is not None:
                    raise rule.raises
                return CommandResult(
                    command=argv,
                    returncode=rule.returncode,
                    stdout=rule.stdout,
                    stderr=rule.stderr,
                )
        if self.strict:
            raise AssertionError(f"Unexpected command: {argv}")
        return CommandResult(command=argv, returncode=0)

    def run(
        self,
        cmd: Sequence[str],
        *,
        capture_output: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        argv = list(cmd)
        self.calls.append(
            RecordedCall(argv, capture_output, False, dict(env) if env else None)
        )
        return self._respond(argv)

    async def run_async(
        self,
        cmd: Sequence[str],
        *,
        capture_output: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        argv = list(cmd)
        self.calls.append(
            RecordedCall(argv, capture_output, True, dict(env) if env else None)
        )
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            return self._respond(argv)
        finally:
            self._in_flight -= 1


def fake_result(returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
    """Standalone CommandResult for tests that do not need a runner."""
    return CommandResult(
        command=["fake"], returncode=returncode, stdout=stdout, stderr=stderr
    )


__all__ = ["FakeCommandRunner", "RecordedCall", "fake_result"]
