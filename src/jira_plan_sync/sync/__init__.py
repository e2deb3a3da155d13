"""Jira operations driven by pull-request activity."""

from jira_plan_sync.sync.issues import (
    close_subtask,
    create_subtask,
    fetch_subtasks,
    get_transitions,
    update_summary,
)
from jira_plan_sync.sync.transitions import (
    ExactStatus,
    FinishedStatus,
    Transition,
    TransitionResult,
    apply_transition,
    resolve_transition,
    update_status,
)

__all__ = [
    "ExactStatus",
    "FinishedStatus",
    "Transition",
    "TransitionResult",
    "apply_transition",
    "close_subtask",
    "create_subtask",
    "fetch_subtasks",
    "get_transitions",
    "resolve_transition",
    "update_status",
    "update_summary",
]
