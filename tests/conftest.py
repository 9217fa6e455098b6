"""Pytest configuration for monorun tests."""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from monorun.infra.io.config import MonorunConfig
from monorun.infra.io.console import set_verbose


def pytest_configure(config: pytest.Config) -> None:
    """Configure test environment before collection.

    Sets up environment variables to:
    - Keep a developer's ~/.config/monorun/.env out of CLI tests
    - Drop tokens and report paths inherited from the shell
    """
    os.environ["MONORUN_CONFIG_DIR"] = "/tmp/monorun-test-config"
    for name in (
        "E2E_TEST_AUTH_TOKEN",
        "NEWMAN_REPORT_DIR",
        "MONORUN_VERBOSE",
        "MONORUN_DEBUG_LOG",
        "MONORUN_REPO_ROOT",
    ):
        os.environ.pop(name, None)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Default unmarked tests to unit category."""
    for item in items:
        if any(marker in item.keywords for marker in ("unit", "integration")):
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _reset_console_state() -> Iterator[None]:
    """Reset verbose mode and drop handlers the CLI attached to "monorun"."""
    set_verbose(False)
    yield
    package_logger = logging.getLogger("monorun")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Minimal monorepo layout with a prettier config and two collections."""
    (tmp_path / ".prettierrc").write_text("{}\n")
    for site in ("sites/arolariu.ro", "sites/api.arolariu.ro"):
        collection = tmp_path / site / "postman-collection.json"
        collection.parent.mkdir(parents=True)
        collection.write_text('{"info": {"name": "api"}, "variable": []}\n')
    return tmp_path


@pytest.fixture
def config(repo_root: Path) -> MonorunConfig:
    return MonorunConfig(repo_root=repo_root, e2e_auth_token="test-token")
