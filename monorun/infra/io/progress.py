"""Progress reporting for external command invocations.

ProgressReporter.track() brackets exactly one CommandRunner call:

- capture mode: a spinner line bound to the label while the command runs,
  replaced on completion by a success/failure glyph line. Captured output is
  printed beneath the glyph only when the command failed.
- streamed mode: a start line, the child writes straight to the terminal,
  then a completion line. Nothing is buffered.

Several capture-mode scopes may be in flight at once (one per concurrent
target); they share a single rich live display that starts with the first
scope and stops with the last.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Iterator

    from monorun.core.protocols import CommandResultProtocol

GLYPH_OK = "✓"
GLYPH_FAIL = "✗"
GLYPH_START = "→"


class ProgressScope:
    """Handle for one in-flight command.

    The caller records the paired result with finish(); the reporter renders
    the completion line when the scope closes.
    """

    def __init__(self, label: str, capture_output: bool):
        self.label = label
        self.capture_output = capture_output
        self.result: CommandResultProtocol | None = None

    def finish(self, result: CommandResultProtocol) -> None:
        self.result = result


class ProgressReporter:
    """Renders progress for executor calls on a rich console."""

    def __init__(self, console: Console | None = None, *, animate: bool = True):
        """Initialize the reporter.

        Args:
            console: Console to render on. Defaults to stdout.
            animate: Show the live spinner in capture mode. Disabled under CI,
                where only completion lines are printed.
        """
        self.console = console or Console(highlight=False)
        self.animate = animate
        self._progress: Progress | None = None
        self._active = 0

    @contextmanager
    def track(self, label: str, capture_output: bool) -> Iterator[ProgressScope]:
        """Bracket one executor call with a progress indicator."""
        scope = ProgressScope(label, capture_output)
        task_id: TaskID | None = None
        if capture_output:
            task_id = self._start_spinner(label)
        else:
            self.console.print(Text.assemble((GLYPH_START, "cyan"), " ", label))

        try:
            yield scope
        except Exception as e:
            self._stop_spinner(task_id)
            self.console.print(
                Text.assemble((f"{GLYPH_FAIL} {label} (error)", "red"), f": {e}")
            )
            raise
        self._stop_spinner(task_id)
        self._render_completion(scope)

    def _start_spinner(self, label: str) -> TaskID | None:
        if not self.animate:
            return None
        if self._progress is None:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("{task.description}", markup=False),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            )
            self._progress.start()
        self._active += 1
        return self._progress.add_task(label, total=None)

    def _stop_spinner(self, task_id: TaskID | None) -> None:
        if task_id is None or self._progress is None:
            return
        self._progress.remove_task(task_id)
        self._active -= 1
        if self._active == 0:
            self._progress.stop()
            self._progress = None

    def _render_completion(self, scope: ProgressScope) -> None:
        result = scope.result
        if result is None:
            self.console.print(Text(f"• {scope.label}", style="dim"))
            return
        if result.ok:
            self.console.print(Text(f"{GLYPH_OK} {scope.label}", style="green"))
            return

        block = Text(
            f"{GLYPH_FAIL} {scope.label} (exit {result.returncode})", style="red"
        )
        if scope.capture_output and result.output.strip():
            for line in result.output.rstrip().splitlines():
                block.append("\n    ")
                block.append(line, style="dim")
        self.console.print(block)
