"""Click context object for sharing state across commands."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

import click
import httpx
from rich.markup import escape

from jira_plan_sync.config import SyncConfig, JiraConfig, WorkflowConfig, load_config
from jira_plan_sync.core.output import OutputFormat, OutputFormatter
from jira_plan_sync.core.logging import LogLevel, setup_logging, StructuredLogger

if TYPE_CHECKING:
    from jira_plan_sync.clients.jira import JiraClient


class SyncContext:
    """Shared context object for jira-plan-sync commands.

    This object is passed through Click's context mechanism and provides
    access to configuration, the Jira client, and output utilities. The
    configuration is loaded once here and handed to the sync operations
    as plain values.
    """

    def __init__(
        self,
        config: SyncConfig | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        quiet: bool = False,
        dry_run: bool = False,
        color: bool | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = config or load_config()
        settings = self._config.global_settings

        # Output settings (CLI overrides config)
        self._output_format = output_format or settings.output_format
        self._verbose = verbose
        self._quiet = quiet
        self._dry_run = dry_run or settings.dry_run
        if color is None:
            color = settings.color == "always" or (
                settings.color == "auto" and sys.stdout.isatty()
            )
        self._color = color

        # Determine log level from verbosity
        if verbose >= 3:
            log_level = LogLevel.DEBUG
        elif verbose >= 1:
            log_level = LogLevel.INFO
        elif quiet:
            log_level = LogLevel.ERROR
        else:
            log_level = settings.verbosity

        setup_logging(log_level, rich_output=color)
        self._logger = StructuredLogger("context")

        self._output = OutputFormatter(
            format=self._output_format,
            color=color,
            quiet=quiet,
        )

        # Lazy-loaded client
        self._transport = transport
        self._jira_client: JiraClient | None = None

    @property
    def config(self) -> SyncConfig:
        """Get the loaded configuration."""
        return self._config

    @property
    def jira_config(self) -> JiraConfig:
        """Get the Jira connection settings."""
        return self._config.jira

    @property
    def workflow(self) -> WorkflowConfig:
        """Get the workflow settings."""
        return self._config.workflow

    @property
    def output(self) -> OutputFormatter:
        """Get the output formatter."""
        return self._output

    @property
    def output_format(self) -> OutputFormat:
        """Get the output format."""
        return self._output_format

    @property
    def dry_run(self) -> bool:
        """Check if dry-run mode is enabled."""
        return self._dry_run

    @property
    def verbose(self) -> int:
        """Get verbosity level."""
        return self._verbose

    @property
    def quiet(self) -> bool:
        """Check if quiet mode is enabled."""
        return self._quiet

    @property
    def color(self) -> bool:
        """Check if color output is enabled."""
        return self._color

    @property
    def jira(self) -> "JiraClient":
        """Get or create the Jira client.

        Raises:
            ConfigError: if the connection settings are incomplete
        """
        if self._jira_client is None:
            from jira_plan_sync.clients.jira import JiraClient

            self._config.jira.require()
            self._logger.debug("Creating Jira client", url=self._config.jira.url)
            self._jira_client = JiraClient(self._config.jira, transport=self._transport)

            click_ctx = click.get_current_context(silent=True)
            if click_ctx is not None:
                click_ctx.call_on_close(self.close)

        return self._jira_client

    def close(self) -> None:
        """Release the Jira client, if one was created."""
        if self._jira_client is not None:
            self._jira_client.close()
            self._jira_client = None

    def log_dry_run(self, action: str, details: dict[str, Any] | None = None) -> None:
        """Log a dry-run action."""
        if self._dry_run:
            msg = f"[dry-run] {action}"
            if details:
                detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
                msg = f"{msg} ({detail_str})"
            self._output.print(f"[dim]{escape(msg)}[/dim]")


# Click decorator for passing context
pass_context = click.make_pass_decorator(SyncContext, ensure=True)
