"""Tools package: command execution and environment utilities."""

from monorun.infra.tools.command_runner import (
    CommandResult,
    CommandRunner,
    run_command,
    run_command_async,
)
from monorun.infra.tools.env import USER_CONFIG_DIR, load_env, load_user_env

__all__ = [
    "USER_CONFIG_DIR",
    "CommandResult",
    "CommandRunner",
    "load_env",
    "load_user_env",
    "run_command",
    "run_command_async",
]
