"""Custom exceptions for jira-plan-sync."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jira_plan_sync.sync.transitions import Transition


class JiraSyncError(Exception):
    """Base exception for all jira-plan-sync errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigError(JiraSyncError):
    """Configuration-related errors."""

    pass


class AuthenticationError(JiraSyncError):
    """Authentication/authorization errors."""

    pass


class JiraError(JiraSyncError):
    """Jira API errors.

    ``status_code`` is None when the request never got a response
    (connection refused, DNS failure, timeout). ``payload`` is the parsed
    JSON error body of any shape, or None when the body was not JSON.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        body: str = "",
        payload: Any = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body
        self.payload = payload

    def __str__(self) -> str:
        return self.message


class TransitionNotFoundError(JiraSyncError):
    """No legal transition leads to the requested status."""

    def __init__(self, issue_key: str, wanted: str, available: list["Transition"]):
        super().__init__(f"No transition found to status '{wanted}' for {issue_key}")
        self.issue_key = issue_key
        self.wanted = wanted
        self.available = available


class SummaryMismatchError(JiraSyncError):
    """The summary read back after an update differs from the one written."""

    def __init__(self, issue_key: str, expected: str, actual: str | None):
        super().__init__(
            f"Failed to update {issue_key}",
            {"expected": expected, "actual": actual},
        )
        self.issue_key = issue_key
        self.expected = expected
        self.actual = actual


class SummaryVerificationError(JiraSyncError):
    """The summary update was accepted but could not be read back."""

    def __init__(self, issue_key: str, error: JiraError):
        super().__init__(f"Failed to verify update of {issue_key}: {error.message}")
        self.issue_key = issue_key
        self.error = error
