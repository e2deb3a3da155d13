"""Sync GitHub pull-request activity with Jira Cloud issues."""

__version__ = "0.1.0"
