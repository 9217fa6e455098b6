"""Domain layer package.

This package contains the monorepo-specific logic:
- targets: Target registries for the format and lint categories
- environment: Toolchain version checks and remediation hooks
- generators: Code generation tasks
- e2e: API test collection, runner invocation and failure summaries
"""
