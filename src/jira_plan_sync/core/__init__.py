"""Core utilities and shared components for jira-plan-sync."""

# Note: Import context lazily to avoid circular imports
# Use: from jira_plan_sync.core.context import SyncContext, pass_context
from jira_plan_sync.core.exceptions import (
    JiraSyncError,
    ConfigError,
    JiraError,
    TransitionNotFoundError,
    SummaryMismatchError,
    SummaryVerificationError,
)
from jira_plan_sync.core.output import OutputFormatter

__all__ = [
    "JiraSyncError",
    "ConfigError",
    "JiraError",
    "TransitionNotFoundError",
    "SummaryMismatchError",
    "SummaryVerificationError",
    "OutputFormatter",
]
