"""Environment loading for monorun.

Centralizes config paths and dotenv loading. Environment variables are read
once into MonorunConfig after load_env() has run; nothing else in the
package reads os.environ ad hoc.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# User config directory (stores a personal .env)
USER_CONFIG_DIR = Path.home() / ".config" / "monorun"


def get_user_env_path() -> Path:
    """Get the user-level .env path, respecting MONORUN_CONFIG_DIR."""
    config_dir = os.environ.get("MONORUN_CONFIG_DIR")
    base = Path(config_dir) if config_dir else USER_CONFIG_DIR
    return base / ".env"


def load_user_env() -> None:
    """Load environment from the user config directory.

    Loads ${USER_CONFIG_DIR}/.env (typically ~/.config/monorun/.env).
    Variables already set in the process environment win.
    """
    load_dotenv(dotenv_path=get_user_env_path())


def load_env(repo_path: Path | None = None) -> None:
    """Load environment from user config and optionally the repository.

    Args:
        repo_path: Optional repository root. If provided, loads
            <repo_path>/.env without overriding variables that are already set
            (including those from the user file).
    """
    load_user_env()
    if repo_path is not None:
        load_dotenv(dotenv_path=repo_path / ".env", override=False)
