"""API end-to-end test support.

- collection: Variable upsert in a collection document
- runner: External test runner invocation and artifact layout
- report: Failure summary extraction and rendering
"""

from monorun.domain.e2e.collection import inject_auth_token, inject_variable
from monorun.domain.e2e.report import FailureEntry, FailureSummary, summarize_failures
from monorun.domain.e2e.runner import ReportArtifacts, run_external_suite

__all__ = [
    "FailureEntry",
    "FailureSummary",
    "ReportArtifacts",
    "inject_auth_token",
    "inject_variable",
    "run_external_suite",
    "summarize_failures",
]
