"""In-memory fake implementations for testing.

Fakes implement the real protocol contracts from monorun.core.protocols, so
interface mismatches show up at test time. Prefer asserting on the state a
fake records over asserting on call order.

Available fakes:
- FakeCommandRunner: Scripted command results keyed by argv tokens
- FakeProgressReporter: Records every tracked scope and its result

Usage:
    from tests.fakes import FakeCommandRunner, FakeProgressReporter

    def test_something():
        runner = FakeCommandRunner()
        runner.on("--check", returncode=1)
"""

from tests.fakes.command_runner import FakeCommandRunner, RecordedCall
from tests.fakes.progress_reporter import FakeProgressReporter, TrackedScope

__all__ = [
    "FakeCommandRunner",
    "FakeProgressReporter",
    "RecordedCall",
    "TrackedScope",
]
