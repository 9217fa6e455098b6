"""Command-line interface for monorun."""

from monorun.cli.cli import app, bootstrap

__all__ = ["app", "bootstrap"]
