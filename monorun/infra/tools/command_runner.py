"""Standardized subprocess execution for monorun.

Every external tool invocation (formatters, linters, generators, the API
test runner, version probes) goes through CommandRunner so that argv
handling, output capture, exit-code normalization and launch errors behave
the same everywhere.

Key types:
- CommandResult: Normalized result of one invocation
- CommandRunner: Runs commands synchronously or on the asyncio event loop
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from monorun.core.errors import IoError, SpawnError
from monorun.core.models import CommandDescriptor

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

# Exit code reported for commands killed after exceeding their timeout
TIMEOUT_EXIT_CODE = 124

# Exit code reported when a process ends without a reportable code
ABNORMAL_EXIT_CODE = 1

DEFAULT_KILL_GRACE_SECONDS = 2.0


def tail(text: str, max_chars: int = 800, max_lines: int = 20) -> str:
    """Truncate text to last N lines and M characters."""
    if not text:
        return ""
    lines = text.splitlines()
    if len(lines) > max_lines:
        lines = lines[-max_lines:]
    clipped = "\n".join(lines)
    if len(clipped) > max_chars:
        return clipped[-max_chars:]
    return clipped


@dataclass(frozen=True)
class CommandResult:
    """Result of one external command invocation.

    Attributes:
        command: The argv that was executed.
        returncode: Normalized exit code (0 = success).
        stdout: Captured stdout (empty when output was streamed).
        stderr: Captured stderr (empty when output was streamed).
        duration_seconds: Wall-clock duration of the invocation.
        timed_out: Whether the command was killed after its timeout.
    """

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """Combined output, stdout first."""
        return self.stdout + self.stderr

    def stdout_tail(self, max_chars: int = 800, max_lines: int = 20) -> str:
        return tail(self.stdout, max_chars=max_chars, max_lines=max_lines)

    def stderr_tail(self, max_chars: int = 800, max_lines: int = 20) -> str:
        return tail(self.stderr, max_chars=max_chars, max_lines=max_lines)


def normalize_returncode(returncode: int | None) -> int:
    """Map abnormal terminations (signal kills, missing codes) to 1."""
    if returncode is None or returncode < 0:
        return ABNORMAL_EXIT_CODE
    return returncode


def _to_argv(cmd: Sequence[str] | CommandDescriptor) -> list[str]:
    if isinstance(cmd, CommandDescriptor):
        return cmd.argv
    argv = [str(part) for part in cmd]
    if not argv:
        raise ValueError("Command must contain at least the program name")
    return argv


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _spawn_reason(exc: OSError) -> str:
    if isinstance(exc, FileNotFoundError):
        return "program not found"
    if isinstance(exc, PermissionError):
        return "permission denied"
    return exc.strerror or str(exc)


class CommandRunner:
    """Runs external commands with a shared working directory and policy.

    No timeout is enforced unless one is configured. With a timeout, the
    command runs in its own process group so the whole tree is terminated:
    SIGTERM first, SIGKILL once the grace period expires.
    """

    def __init__(
        self,
        cwd: Path,
        timeout_seconds: float | None = None,
        kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
    ):
        """Initialize the runner.

        Args:
            cwd: Working directory for every command.
            timeout_seconds: Optional per-command timeout. None disables it.
            kill_grace_seconds: Delay between SIGTERM and SIGKILL on timeout.
        """
        self.cwd = Path(cwd)
        self.timeout_seconds = timeout_seconds
        self.kill_grace_seconds = kill_grace_seconds

    def _merge_env(self, env: Mapping[str, str] | None) -> dict[str, str]:
        merged = dict(os.environ)
        if env:
            merged.update(env)
        return merged

    def _use_process_group(self) -> bool:
        return self.timeout_seconds is not None and sys.platform != "win32"

    def _signal(
        self, proc: subprocess.Popen | asyncio.subprocess.Process, sig: int
    ) -> None:
        try:
            if self._use_process_group():
                os.killpg(proc.pid, sig)
            else:
                proc.send_signal(sig)
        except ProcessLookupError:
            pass

    def _finish(
        self,
        argv: list[str],
        returncode: int | None,
        stdout: bytes | None,
        stderr: bytes | None,
        start: float,
        timed_out: bool,
    ) -> CommandResult:
        duration = time.monotonic() - start
        code = TIMEOUT_EXIT_CODE if timed_out else normalize_returncode(returncode)
        logger.debug(
            "Command finished: %s returncode=%d duration=%.2fs timed_out=%s",
            " ".join(argv),
            code,
            duration,
            timed_out,
        )
        return CommandResult(
            command=argv,
            returncode=code,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            duration_seconds=duration,
            timed_out=timed_out,
        )

    def run(
        self,
        cmd: Sequence[str] | CommandDescriptor,
        *,
        capture_output: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command to completion, blocking the caller.

        Args:
            cmd: argv list or CommandDescriptor.
            capture_output: Capture stdout/stderr separately (True) or inherit
                the terminal's streams (False).
            env: Extra environment variables merged over os.environ.

        Raises:
            SpawnError: The program could not be launched.
            IoError: The output streams could not be read.
        """
        argv = _to_argv(cmd)
        stream = subprocess.PIPE if capture_output else None
        logger.debug("Running command: %s (cwd=%s)", " ".join(argv), self.cwd)
        start = time.monotonic()
        try:
            proc = subprocess.Popen(
                argv,
                cwd=self.cwd,
                env=self._merge_env(env),
                stdout=stream,
                stderr=stream,
                start_new_session=self._use_process_group(),
            )
        except OSError as e:
            raise SpawnError(argv[0], _spawn_reason(e)) from e

        timed_out = False
        try:
            stdout, stderr = proc.communicate(timeout=self.timeout_seconds)
        except subprocess.TimeoutExpired:
            timed_out = True
            self._signal(proc, signal.SIGTERM)
            try:
                stdout, stderr = proc.communicate(timeout=self.kill_grace_seconds)
            except subprocess.TimeoutExpired:
                self._signal(proc, signal.SIGKILL)
                stdout, stderr = proc.communicate()
        except OSError as e:
            proc.kill()
            proc.wait()
            raise IoError(argv[0], str(e)) from e

        return self._finish(argv, proc.returncode, stdout, stderr, start, timed_out)

    async def run_async(
        self,
        cmd: Sequence[str] | CommandDescriptor,
        *,
        capture_output: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command to completion on the event loop.

        The only suspension point is waiting for the child to exit, so many
        calls can be in flight concurrently on one loop.

        Raises:
            SpawnError: The program could not be launched.
            IoError: The output streams could not be read.
        """
        argv = _to_argv(cmd)
        stream = asyncio.subprocess.PIPE if capture_output else None
        logger.debug("Running command: %s (cwd=%s)", " ".join(argv), self.cwd)
        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=self.cwd,
                env=self._merge_env(env),
                stdout=stream,
                stderr=stream,
                start_new_session=self._use_process_group(),
            )
        except OSError as e:
            raise SpawnError(argv[0], _spawn_reason(e)) from e

        try:
            if self.timeout_seconds is None:
                stdout, stderr = await proc.communicate()
            else:
                stdout, stderr = await asyncio.wait_for(
                    proc.communicate(), timeout=self.timeout_seconds
                )
        except TimeoutError:
            await self._terminate_async(proc)
            return self._finish(argv, proc.returncode, None, None, start, True)
        except OSError as e:
            proc.kill()
            await proc.wait()
            raise IoError(argv[0], str(e)) from e

        return self._finish(argv, proc.returncode, stdout, stderr, start, False)

    async def _terminate_async(self, proc: asyncio.subprocess.Process) -> None:
        self._signal(proc, signal.SIGTERM)
        try:
            await asyncio.wait_for(proc.wait(), timeout=self.kill_grace_seconds)
        except TimeoutError:
            self._signal(proc, signal.SIGKILL)
            await proc.wait()


def run_command(
    cmd: Sequence[str] | CommandDescriptor,
    cwd: Path,
    *,
    capture_output: bool = True,
    env: Mapping[str, str] | None = None,
    timeout_seconds: float | None = None,
) -> CommandResult:
    """Run a single command with a throwaway CommandRunner."""
    runner = CommandRunner(cwd=cwd, timeout_seconds=timeout_seconds)
    return runner.run(cmd, capture_output=capture_output, env=env)


async def run_command_async(
    cmd: Sequence[str] | CommandDescriptor,
    cwd: Path,
    *,
    capture_output: bool = True,
    env: Mapping[str, str] | None = None,
    timeout_seconds: float | None = None,
) -> CommandResult:
    """Async variant of run_command."""
    runner = CommandRunner(cwd=cwd, timeout_seconds=timeout_seconds)
    return await runner.run_async(cmd, capture_output=capture_output, env=env)
