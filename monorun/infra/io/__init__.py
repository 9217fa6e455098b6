"""I/O utilities for monorun.

This package contains:
- config: MonorunConfig dataclass for configuration management
- console: Colored status-line helpers
- progress: Spinner / streamed progress reporting per command
- debug_log: Debug log file handler
"""

from monorun.core.errors import ConfigurationError
from monorun.infra.io.config import MonorunConfig
from monorun.infra.io.progress import ProgressReporter, ProgressScope

__all__ = [
    "ConfigurationError",
    "MonorunConfig",
    "ProgressReporter",
    "ProgressScope",
]
