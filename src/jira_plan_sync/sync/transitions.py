"""Workflow transition resolution and application.

Jira owns the workflow: an issue only exposes the transitions that are
legal from its current status. Resolving a target status therefore means
fetching that edge set fresh, picking the first edge whose destination
matches, and firing it.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from jira_plan_sync.clients.jira import JiraClient
from jira_plan_sync.core.exceptions import JiraError, TransitionNotFoundError
from jira_plan_sync.core.logging import StructuredLogger

logger = StructuredLogger(__name__)

FINISHED_STATUSES = ("Closed", "Cancelled", "Done")
ACTIVE_STATUSES = frozenset({"To Do", "In Progress", "Selected for Development"})

StatusPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class Transition:
    """A legal move from an issue's current status to another status."""

    id: str
    name: str
    to_status: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Transition":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            to_status=(data.get("to") or {}).get("name", ""),
        )

    def __str__(self) -> str:
        return f"{self.id}: {self.name} -> {self.to_status}"


@dataclass
class TransitionResult:
    """Outcome of an applied transition."""

    issue_key: str
    transition: Transition
    resolution_cleared: bool = False
    warnings: list[str] = field(default_factory=list)


class ExactStatus:
    """Matches one status name exactly."""

    def __init__(self, name: str):
        self.name = name

    def __call__(self, status: str) -> bool:
        return status == self.name

    def __str__(self) -> str:
        return self.name


class FinishedStatus:
    """Matches any of a set of terminal status labels, ignoring case.

    The labels are searched for, not compared, so "Done" also matches a
    workspace status named "Done (verified)".
    """

    def __init__(self, labels: Iterable[str] = FINISHED_STATUSES):
        self.labels = list(labels)
        self.pattern = re.compile("|".join(re.escape(label) for label in self.labels), re.IGNORECASE)

    def __call__(self, status: str) -> bool:
        return bool(self.pattern.search(status))

    def __str__(self) -> str:
        return "/".join(self.labels)


def list_transitions(client: JiraClient, issue_key: str) -> list[Transition]:
    """Fetch the transitions currently legal for an issue, in Jira's order."""
    payload = client.get_transitions(issue_key)
    return [Transition.from_api(t) for t in payload.get("transitions", [])]


def resolve_transition(
    client: JiraClient,
    issue_key: str,
    predicate: StatusPredicate,
) -> Transition:
    """Find the first legal transition whose destination satisfies ``predicate``.

    Args:
        client: Jira client
        issue_key: Issue key (e.g., "PROJ-123")
        predicate: Test applied to each destination status name

    Returns:
        The first matching transition

    Raises:
        TransitionNotFoundError: if nothing matches; carries every
            available transition for diagnosis
    """
    transitions = list_transitions(client, issue_key)

    for transition in transitions:
        if predicate(transition.to_status):
            logger.debug(
                "Resolved transition",
                issue=issue_key,
                transition=transition.id,
                to=transition.to_status,
            )
            return transition

    raise TransitionNotFoundError(issue_key, str(predicate), transitions)


def apply_transition(
    client: JiraClient,
    issue_key: str,
    transition: Transition,
    active_statuses: Iterable[str] = ACTIVE_STATUSES,
) -> TransitionResult:
    """Fire a transition, then clear the resolution if the issue became active.

    The transition itself must succeed; clearing the resolution is a
    follow-up whose failure only produces a warning.

    Raises:
        JiraError: if Jira rejects the transition
    """
    client.transition_issue(issue_key, transition.id)
    logger.info("Transitioned issue", issue=issue_key, to=transition.to_status)

    result = TransitionResult(issue_key=issue_key, transition=transition)

    if transition.to_status in set(active_statuses):
        warning = best_effort(
            "clear resolution",
            client.update_issue,
            issue_key,
            {"resolution": None},
        )
        if warning:
            result.warnings.append(warning)
        else:
            result.resolution_cleared = True

    return result


def update_status(
    client: JiraClient,
    issue_key: str,
    target_status: str,
    active_statuses: Iterable[str] = ACTIVE_STATUSES,
) -> TransitionResult:
    """Move an issue to exactly ``target_status``."""
    transition = resolve_transition(client, issue_key, ExactStatus(target_status))
    return apply_transition(client, issue_key, transition, active_statuses)


def best_effort(action: str, call: Callable[..., Any], *args: Any) -> str | None:
    """Run a secondary Jira call, turning its failure into a warning message.

    Returns:
        None on success, otherwise a warning such as
        "Failed to clear resolution (HTTP 404)"
    """
    try:
        call(*args)
    except JiraError as e:
        reason = f"HTTP {e.status_code}" if e.status_code else e.message
        logger.debug("Best-effort call failed", action=action, reason=reason)
        return f"Failed to {action} ({reason})"
    return None
