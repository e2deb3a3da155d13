"""Issue operations that mirror pull-request activity in Jira."""

from typing import Any, Iterable

from jira_plan_sync.clients.jira import JiraClient
from jira_plan_sync.core.exceptions import (
    JiraError,
    SummaryMismatchError,
    SummaryVerificationError,
)
from jira_plan_sync.core.logging import StructuredLogger
from jira_plan_sync.sync.transitions import (
    ACTIVE_STATUSES,
    FINISHED_STATUSES,
    FinishedStatus,
    TransitionResult,
    apply_transition,
    best_effort,
    resolve_transition,
)

logger = StructuredLogger(__name__)

SUBTASK_FIELDS = ["summary", "status", "key"]


def subtask_summary(pr_number: str, title: str) -> str:
    """Summary of the work item tracking a pull request."""
    return f"PR{pr_number}: {title}"


def create_subtask(
    client: JiraClient,
    project_key: str,
    epic_key: str,
    pr_number: str,
    title: str,
    label: str,
    description: str = "",
    issue_type: str = "Task",
) -> str:
    """Create the work item for a pull request under an epic.

    Returns:
        Key of the created issue
    """
    result = client.create_issue(
        project_key=project_key,
        summary=subtask_summary(pr_number, title),
        issue_type=issue_type,
        description=description,
        labels=[label],
        parent_key=epic_key,
    )
    logger.info("Created issue", key=result["key"], epic=epic_key)
    return result["key"]


def update_summary(client: JiraClient, issue_key: str, summary: str) -> None:
    """Set an issue summary and confirm it by reading it back.

    Jira answers the update with an empty body, so the read-back is the
    only confirmation that the new value stuck.

    Raises:
        JiraError: if Jira rejects the update
        SummaryVerificationError: if the read-back fails or the stored
            summary differs from ``summary``
    """
    client.update_issue(issue_key, {"summary": summary})
    verify_summary(client, issue_key, summary)


def verify_summary(client: JiraClient, issue_key: str, summary: str) -> None:
    """Check that an issue's stored summary equals ``summary``.

    Raises:
        SummaryVerificationError: wrapping the failed read-back
        SummaryMismatchError: if the stored summary differs
    """
    try:
        issue = client.get_issue(issue_key, fields=["summary"])
    except JiraError as e:
        raise SummaryVerificationError(issue_key, e) from e

    actual = (issue.get("fields") or {}).get("summary")
    if actual != summary:
        raise SummaryMismatchError(issue_key, summary, actual)



def close_subtask(
    client: JiraClient,
    issue_key: str,
    comment: str,
    finished_statuses: Iterable[str] = FINISHED_STATUSES,
    active_statuses: Iterable[str] = ACTIVE_STATUSES,
) -> TransitionResult:
    """Detach an issue from its epic, comment on it, and close it.

    Detaching and commenting are best-effort and happen before the
    transition lookup; their failures end up in the result's warnings.
    """
    warnings = []
    for warning in (
        best_effort("remove parent link", client.update_issue, issue_key, {"parent": None}),
        best_effort("add comment", client.add_comment, issue_key, comment),
    ):
        if warning:
            warnings.append(warning)

    transition = resolve_transition(client, issue_key, FinishedStatus(finished_statuses))
    result = apply_transition(client, issue_key, transition, active_statuses)
    result.warnings[:0] = warnings
    return result


def get_transitions(client: JiraClient, issue_key: str) -> dict[str, Any]:
    """Return Jira's transitions payload for an issue as-is."""
    return client.get_transitions(issue_key)


def fetch_subtasks(client: JiraClient, epic_key: str, max_results: int = 100) -> dict[str, Any]:
    """Return the search payload of every child of an epic."""
    return client.search_issues(
        f"parent={epic_key}",
        max_results=max_results,
        fields=SUBTASK_FIELDS,
    )
