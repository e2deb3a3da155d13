"""Error and result reporting shared by the commands."""

from jira_plan_sync.core.context import SyncContext
from jira_plan_sync.core.exceptions import JiraError, TransitionNotFoundError
from jira_plan_sync.sync.transitions import TransitionResult


def report_jira_error(
    ctx: SyncContext,
    action: str,
    error: JiraError,
    field_errors: bool = False,
) -> None:
    """Print a failed Jira call to stderr.

    With ``field_errors`` the body is rendered as Jira's error lists
    (one ``errorMessages`` entry per line, then ``field: message``);
    otherwise a JSON body is pretty-printed and anything else is printed
    verbatim. A 2xx answer that could not be parsed only gets its reason.
    """
    if error.status_code is None:
        ctx.output.print_error(error.message)
        return

    if error.status_code < 400:
        ctx.output.print_error(f"{action}: {error.message}")
        return

    ctx.output.print_error(f"{action} (HTTP {error.status_code}):")

    if field_errors and error.details:
        lines = list(error.details.get("errorMessages", []))
        lines.extend(f"{k}: {v}" for k, v in error.details.get("errors", {}).items())
        ctx.output.print_error_body("\n".join(lines))
    elif error.payload is not None:
        ctx.output.print_error_body(error.payload, as_json=True)
    else:
        ctx.output.print_error_body(error.body)



def report_missing_transition(
    ctx: SyncContext,
    error: TransitionNotFoundError,
    headline: str,
) -> None:
    """Print why no transition matched, followed by every available one."""
    ctx.output.print_error(headline)
    ctx.output.print_error_body("Available transitions:")
    for transition in error.available:
        ctx.output.print_error_body(str(transition))


def report_result(ctx: SyncContext, result: TransitionResult) -> None:
    """Print the follow-up outcome of an applied transition."""
    if result.resolution_cleared:
        ctx.output.print_success(f"Cleared resolution for {result.issue_key}")
    for warning in result.warnings:
        ctx.output.print_warning(warning)
