"""Main CLI entry point for jira-plan-sync."""

import functools
import sys
from typing import Any

import click
from rich.markup import escape

from jira_plan_sync import __version__
from jira_plan_sync.config import load_config
from jira_plan_sync.core.context import SyncContext
from jira_plan_sync.core.output import OutputFormat, error_console
from jira_plan_sync.core.exceptions import JiraSyncError, ConfigError
from jira_plan_sync.commands.subtasks import (
    close_subtask,
    create_subtask,
    fetch_subtasks,
    update_summary,
)
from jira_plan_sync.commands.transitions import get_transitions, update_status


CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}


class OutputFormatType(click.ParamType):
    """Custom Click parameter type for output format."""

    name = "format"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value.lower())
        except ValueError:
            self.fail(
                f"Invalid format '{value}'. Choose from: json, yaml, table, raw",
                param,
                ctx,
            )


OUTPUT_FORMAT = OutputFormatType()


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"jira-plan-sync version {__version__}")
    ctx.exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=OUTPUT_FORMAT,
    metavar="FORMAT",
    help="Output format: json, yaml, table, raw",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for info, -vvv for debug)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress non-essential output",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would happen without making changes",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    metavar="FILE",
    envvar="JIRA_PLAN_SYNC_CONFIG",
    help="Path to config file",
)
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.pass_context
def cli(
    ctx: click.Context,
    output_format: OutputFormat | None,
    verbose: int,
    quiet: bool,
    dry_run: bool,
    no_color: bool,
    config_file: str | None,
) -> None:
    """Jira Plan Sync - mirror GitHub pull-request activity in Jira Cloud.

    Creates a work item per pull request under an epic, keeps its summary
    and status in step with the PR, and closes it when the PR goes away.

    \b
    Examples:
        jira-plan-sync create-subtask PROJ-100 42 "Add login form" frontend
        jira-plan-sync update-status PROJ-123 "In Progress"
        jira-plan-sync close-subtask PROJ-123 "PR closed without merging"

    \b
    Configuration:
        JIRA_URL, JIRA_EMAIL, JIRA_API_TOKEN   Connection (required)
        JIRA_PROJECT_KEY                       Project for create-subtask
        ~/.jira-plan-sync/config.yaml          User configuration
        ./jira-plan-sync.yaml                  Project configuration
    """
    # An object passed in by the caller (tests, embedding) wins
    if isinstance(ctx.obj, SyncContext):
        return

    try:
        config = load_config(config_file)

        ctx.obj = SyncContext(
            config=config,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            dry_run=dry_run,
            color=False if no_color else None,
        )

        if ctx.obj.dry_run and not quiet:
            ctx.obj.output.print_warning("Dry-run mode enabled - no changes will be made")

    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        sys.exit(1)


cli.add_command(create_subtask)
cli.add_command(update_summary)
cli.add_command(update_status)
cli.add_command(close_subtask)
cli.add_command(get_transitions)
cli.add_command(fetch_subtasks)


@cli.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    sync_ctx: SyncContext = ctx.obj
    jira = sync_ctx.jira_config
    workflow = sync_ctx.workflow
    config_data = {
        "output_format": sync_ctx.output_format.value,
        "dry_run": sync_ctx.dry_run,
        "verbose": sync_ctx.verbose,
        "jira": {
            "url": jira.url,
            "email": jira.email,
            "has_token": bool(jira.api_token),
            "project_key": jira.project_key,
            "timeout": jira.timeout,
        },
        "workflow": workflow.model_dump(),
    }
    sync_ctx.output.print_data(config_data, title="Current Configuration")


def run(command: click.Command, args: list[str] | None = None) -> None:
    """Run a command and exit 1 on any failure, usage errors included."""
    try:
        rv = command.main(args=args, standalone_mode=False)
    except click.Abort:
        # The command has already reported the failure
        sys.exit(1)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except JiraSyncError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if isinstance(rv, int) and rv:
        sys.exit(rv)


def main() -> None:
    """Main entry point."""
    run(cli)


# Single-purpose scripts, one per operation
create_subtask_main = functools.partial(run, create_subtask)
update_summary_main = functools.partial(run, update_summary)
update_status_main = functools.partial(run, update_status)
close_subtask_main = functools.partial(run, close_subtask)
get_transitions_main = functools.partial(run, get_transitions)
fetch_subtasks_main = functools.partial(run, fetch_subtasks)


if __name__ == "__main__":
    main()
