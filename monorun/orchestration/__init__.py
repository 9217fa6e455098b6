"""Orchestration layer: workflows that sequence domain operations.

- phased: Concurrent check-then-remediate runs for format and lint
- e2e: API end-to-end test workflow
- generate: Sequential code generation workflow
- factory: Wiring of workflows to runners and reporters
"""
