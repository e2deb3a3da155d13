"""Sub-task commands - create, rename, close and list PR work items."""

import click

from jira_plan_sync.commands.common import (
    report_jira_error,
    report_missing_transition,
    report_result,
)
from jira_plan_sync.core.context import pass_context, SyncContext
from jira_plan_sync.core.exceptions import (
    JiraError,
    SummaryMismatchError,
    SummaryVerificationError,
    TransitionNotFoundError,
)
from jira_plan_sync.core.output import OutputFormat
from jira_plan_sync.sync import issues, transitions


@click.command("create-subtask")
@click.argument("epic_key")
@click.argument("pr_number")
@click.argument("title")
@click.argument("label")
@click.argument("description", required=False, default="")
@pass_context
def create_subtask(
    ctx: SyncContext,
    epic_key: str,
    pr_number: str,
    title: str,
    label: str,
    description: str,
) -> None:
    """Create a work item for a pull request under an epic.

    The summary becomes "PR<PR_NUMBER>: <TITLE>". Prints the new issue key.
    Requires JIRA_PROJECT_KEY in addition to the connection settings.

    \b
    Examples:
        jira-plan-sync create-subtask PROJ-100 42 "Add login form" frontend
        jira-plan-sync create-subtask PROJ-100 42 "Add login form" frontend "Adds the form"
    """
    ctx.jira_config.require(project_key=True)

    if ctx.dry_run:
        ctx.log_dry_run("create issue", {
            "epic": epic_key,
            "summary": issues.subtask_summary(pr_number, title),
            "label": label,
        })
        return

    try:
        key = issues.create_subtask(
            ctx.jira,
            project_key=ctx.jira_config.project_key,
            epic_key=epic_key,
            pr_number=pr_number,
            title=title,
            label=label,
            description=description,
            issue_type=ctx.workflow.issue_type,
        )
    except JiraError as e:
        report_jira_error(ctx, "Failed to create child work item", e, field_errors=True)
        raise click.Abort()

    ctx.output.print_raw(key)


@click.command("update-summary")
@click.argument("issue_key")
@click.argument("summary")
@pass_context
def update_summary(ctx: SyncContext, issue_key: str, summary: str) -> None:
    """Set an issue summary and verify it was stored.

    \b
    Examples:
        jira-plan-sync update-summary PROJ-123 "PR42: Add login form"
    """
    client = ctx.jira

    if ctx.dry_run:
        ctx.log_dry_run("update summary", {"issue_key": issue_key, "summary": summary})
        return

    try:
        issues.update_summary(client, issue_key, summary)
    except SummaryMismatchError as e:
        ctx.output.print_error(e.message)
        raise click.Abort()
    except SummaryVerificationError as e:
        report_jira_error(ctx, "Failed to verify update", e.error)
        raise click.Abort()
    except JiraError as e:
        report_jira_error(ctx, f"Failed to update {issue_key}", e)
        raise click.Abort()

    ctx.output.print_success(f"Updated: {issue_key}")


@click.command("close-subtask")
@click.argument("issue_key")
@click.argument("comment")
@pass_context
def close_subtask(ctx: SyncContext, issue_key: str, comment: str) -> None:
    """Detach an issue from its epic, comment on it, and close it.

    The closing transition is the first one leading to a finished status
    (Closed, Cancelled or Done by default, case-insensitive). Failing to
    detach or comment only produces a warning.

    \b
    Examples:
        jira-plan-sync close-subtask PROJ-123 "PR #42 was closed without merging"
    """
    client = ctx.jira
    workflow = ctx.workflow

    try:
        if ctx.dry_run:
            transition = transitions.resolve_transition(
                client, issue_key, transitions.FinishedStatus(workflow.finished_statuses)
            )
            ctx.log_dry_run("close issue", {"issue_key": issue_key, "transition": transition})
            return

        result = issues.close_subtask(
            client,
            issue_key,
            comment,
            finished_statuses=workflow.finished_statuses,
            active_statuses=workflow.active_statuses,
        )

    except TransitionNotFoundError as e:
        report_missing_transition(ctx, e, f"No close/done transition found for {issue_key}")
        raise click.Abort()
    except JiraError as e:
        report_jira_error(ctx, "Failed to close subtask", e)
        raise click.Abort()

    ctx.output.print_success(f"Successfully closed {issue_key}")
    report_result(ctx, result)


@click.command("fetch-subtasks")
@click.argument("epic_key")
@pass_context
def fetch_subtasks(ctx: SyncContext, epic_key: str) -> None:
    """List the child issues of an epic.

    \b
    Examples:
        jira-plan-sync fetch-subtasks PROJ-100
        jira-plan-sync -o table fetch-subtasks PROJ-100
    """
    try:
        payload = issues.fetch_subtasks(
            ctx.jira,
            epic_key,
            max_results=ctx.workflow.search_max_results,
        )
    except JiraError as e:
        report_jira_error(ctx, "Failed to fetch subtasks", e)
        raise click.Abort()

    if ctx.output_format in (OutputFormat.JSON, OutputFormat.YAML):
        ctx.output.print_data(payload)
        return

    issues_data = []
    for issue in payload.get("issues", []):
        fields = issue.get("fields", {})
        issues_data.append({
            "key": issue["key"],
            "status": (fields.get("status") or {}).get("name", ""),
            "summary": fields.get("summary", ""),
        })

    if ctx.output_format == OutputFormat.RAW:
        for row in issues_data:
            ctx.output.print_raw(f"{row['key']}\t{row['status']}\t{row['summary']}")
        return

    ctx.output.print_data(
        issues_data,
        columns=["key", "status", "summary"],
        title=f"Subtasks of {epic_key}",
    )
