"""monorun: concurrent format, lint and API test orchestration for a monorepo."""

__version__ = "0.1.0"
