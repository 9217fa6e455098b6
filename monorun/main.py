#!/usr/bin/env python3
"""
monorun: monorepo task runner.

This module is a thin shim that exposes the CLI app from monorun.cli.

Usage:
    monorun format [TARGET]
    monorun lint [TARGET]
    monorun test-e2e TARGET
    monorun setup
    monorun generate [--env] [--acks] [--i18n] [--gql]
"""

from monorun.cli.cli import bootstrap

# Load .env files before the app reads any configuration
bootstrap()

from monorun.cli.cli import app  # noqa: E402

if __name__ == "__main__":
    app()
