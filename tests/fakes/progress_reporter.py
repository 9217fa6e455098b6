"""Fake ProgressReporter that records scopes instead of rendering them."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from monorun.core.protocols import CommandResultProtocol


@dataclass
class TrackedScope:
    """One track() bracket as seen by the fake."""

    label: str
    capture_output: bool
    result: CommandResultProtocol | None = None
    error: BaseException | None = None
    closed: bool = False

    def finish(self, result: CommandResultProtocol) -> None:
        self.result = result


@dataclass
class FakeProgressReporter:
    """Implements ProgressReporterPort; scopes are kept in open order."""

    scopes: list[TrackedScope] = field(default_factory=list)

    @contextmanager
    def track(self, label: str, capture_output: bool) -> Iterator[TrackedScope]:
        scope = TrackedScope(label, capture_output)
        self.scopes.append(scope)
        try:
            yield scope
        except Exception as e:
            scope.error = e
            raise
        finally:
            scope.closed = True

    @property
    def labels(self) -> list[str]:
        return [scope.label for scope in self.scopes]
