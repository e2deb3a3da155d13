"""Workflow status commands."""

import click

from jira_plan_sync.commands.common import (
    report_jira_error,
    report_missing_transition,
    report_result,
)
from jira_plan_sync.core.context import pass_context, SyncContext
from jira_plan_sync.core.exceptions import JiraError, TransitionNotFoundError
from jira_plan_sync.core.output import OutputFormat
from jira_plan_sync.sync import issues, transitions


@click.command("update-status")
@click.argument("issue_key")
@click.argument("target_status")
@pass_context
def update_status(ctx: SyncContext, issue_key: str, target_status: str) -> None:
    """Transition an issue to a status, matched by exact name.

    Moving back to an active status ('To Do', 'In Progress',
    'Selected for Development') also clears the issue's resolution.

    \b
    Examples:
        jira-plan-sync update-status PROJ-123 "In Progress"
        jira-plan-sync update-status PROJ-123 "Done"
    """
    client = ctx.jira

    try:
        if ctx.dry_run:
            transition = transitions.resolve_transition(
                client, issue_key, transitions.ExactStatus(target_status)
            )
            ctx.log_dry_run("transition issue", {"issue_key": issue_key, "transition": transition})
            return

        result = transitions.update_status(
            client,
            issue_key,
            target_status,
            active_statuses=ctx.workflow.active_statuses,
        )

    except TransitionNotFoundError as e:
        report_missing_transition(ctx, e, f"No transition found to status '{target_status}'")
        raise click.Abort()
    except JiraError as e:
        report_jira_error(ctx, "Failed to update status", e)
        raise click.Abort()

    ctx.output.print_success(f"Successfully transitioned {issue_key} to '{target_status}'")
    report_result(ctx, result)


@click.command("get-transitions")
@click.argument("issue_key")
@pass_context
def get_transitions(ctx: SyncContext, issue_key: str) -> None:
    """List the transitions currently available for an issue.

    \b
    Examples:
        jira-plan-sync get-transitions PROJ-123
        jira-plan-sync -o table get-transitions PROJ-123
    """
    try:
        payload = issues.get_transitions(ctx.jira, issue_key)
    except JiraError as e:
        report_jira_error(ctx, "Failed to fetch transitions", e)
        raise click.Abort()

    if ctx.output_format in (OutputFormat.JSON, OutputFormat.YAML):
        ctx.output.print_data(payload)
        return

    available = [transitions.Transition.from_api(t) for t in payload.get("transitions", [])]
    if ctx.output_format == OutputFormat.RAW:
        for transition in available:
            ctx.output.print_raw(str(transition))
        return

    ctx.output.print_data(
        [{"id": t.id, "name": t.name, "to": t.to_status} for t in available],
        columns=["id", "name", "to"],
        title=f"Available transitions for {issue_key}",
    )
