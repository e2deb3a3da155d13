"""API clients for external services."""

from jira_plan_sync.clients.jira import JiraClient

__all__ = ["JiraClient"]
