"""Command implementations for the jira-plan-sync CLI."""
