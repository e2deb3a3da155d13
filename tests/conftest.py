"""Pytest fixtures for jira-plan-sync tests."""

import json
import os
from typing import Any, Callable, Generator

import httpx
import pytest
from click.testing import CliRunner

from jira_plan_sync.clients.jira import JiraClient
from jira_plan_sync.config import JiraConfig, SyncConfig
from jira_plan_sync.core.context import SyncContext
from jira_plan_sync.core.output import OutputFormat


class FakeJira:
    """Scripted stand-in for the Jira REST API.

    Routes are keyed by (method, path); every request is recorded.
    Unrouted requests get a Jira-style 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        text: str | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            if json is not None:
                return httpx.Response(status, json=json)
            return httpx.Response(status)

        self.routes[(method, path)] = respond

    def on_call(
        self,
        method: str,
        path: str,
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"errorMessages": ["Issue does not exist"], "errors": {}})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


def transitions_payload(*transitions: tuple[str, str, str]) -> dict[str, Any]:
    """Build a GET transitions body from (id, name, to) triples."""
    return {
        "transitions": [
            {"id": tid, "name": name, "to": {"name": to}} for tid, name, to in transitions
        ]
    }


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def jira_config() -> JiraConfig:
    """Complete Jira connection settings."""
    return JiraConfig(
        url="https://test.atlassian.net",
        email="bot@example.com",
        api_token="test-token",
        project_key="PROJ",
    )


@pytest.fixture
def mock_config(jira_config: JiraConfig) -> SyncConfig:
    """Create a mock configuration."""
    return SyncConfig(jira=jira_config)


@pytest.fixture
def fake_jira() -> FakeJira:
    """Scripted Jira API."""
    return FakeJira()


@pytest.fixture
def jira_client(jira_config: JiraConfig, fake_jira: FakeJira) -> Generator[JiraClient, None, None]:
    """Jira client wired to the fake API."""
    with JiraClient(jira_config, transport=fake_jira.transport) as client:
        yield client


@pytest.fixture
def sync_context(mock_config: SyncConfig, fake_jira: FakeJira) -> SyncContext:
    """Create a context whose Jira client talks to the fake API."""
    return SyncContext(
        config=mock_config,
        output_format=OutputFormat.JSON,
        verbose=0,
        quiet=False,
        dry_run=False,
        color=False,
        transport=fake_jira.transport,
    )


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before each test."""
    env_vars = [
        f"{prefix}{name}"
        for prefix in ("JIRA_PLAN_SYNC_", "JIRA_")
        for name in ("URL", "EMAIL", "API_TOKEN", "PROJECT_KEY", "TIMEOUT")
    ] + ["JIRA_PLAN_SYNC_CONFIG"]

    original = {k: os.environ.get(k) for k in env_vars}

    for k in env_vars:
        os.environ.pop(k, None)

    yield

    for k, v in original.items():
        if v is not None:
            os.environ[k] = v
        else:
            os.environ.pop(k, None)
