"""Tests for the Jira API client."""

import base64

import httpx
import pytest

from conftest import FakeJira
from jira_plan_sync.clients.jira import JiraClient
from jira_plan_sync.config import JiraConfig
from jira_plan_sync.core.exceptions import AuthenticationError, JiraError


class TestJiraClient:
    """Tests for JiraClient."""

    def test_client_initialization(self, jira_config: JiraConfig):
        """Test client can be initialized."""
        client = JiraClient(jira_config)
        assert client._config == jira_config
        assert client._client is None  # Lazy initialization

    def test_basic_auth_header(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("GET", "/rest/api/3/issue/PROJ-1/transitions", json={"transitions": []})

        jira_client.get_transitions("PROJ-1")

        request = fake_jira.requests[0]
        expected = base64.b64encode(b"bot@example.com:test-token").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Content-Type"] == "application/json"
        assert request.url.host == "test.atlassian.net"

    def test_trailing_slash_in_url(self, fake_jira: FakeJira):
        config = JiraConfig(url="https://test.atlassian.net/", email="a@b.c", api_token="t")
        fake_jira.on("GET", "/rest/api/3/issue/PROJ-1/transitions", json={"transitions": []})

        with JiraClient(config, transport=fake_jira.transport) as client:
            client.get_transitions("PROJ-1")

        assert fake_jira.requests[0].url.path == "/rest/api/3/issue/PROJ-1/transitions"

    def test_empty_body_returns_none(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("PUT", "/rest/api/3/issue/PROJ-1", status=204)

        assert jira_client.put("/rest/api/3/issue/PROJ-1", json={"fields": {}}) is None

    def test_error_messages_joined(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("GET", "/rest/api/3/issue/PROJ-1", status=404, json={
            "errorMessages": ["Issue does not exist", "or you lack permission"],
            "errors": {},
        })

        with pytest.raises(JiraError) as exc_info:
            jira_client.get_issue("PROJ-1")

        error = exc_info.value
        assert error.status_code == 404
        assert error.message == "Issue does not exist; or you lack permission"
        assert error.details["errorMessages"] == ["Issue does not exist", "or you lack permission"]

    def test_field_errors_used_when_no_messages(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("POST", "/rest/api/3/issue", status=400, json={
            "errorMessages": [],
            "errors": {"summary": "You must specify a summary of the issue."},
        })

        with pytest.raises(JiraError) as exc_info:
            jira_client.create_issue("PROJ", "")

        assert exc_info.value.message == "summary: You must specify a summary of the issue."

    def test_non_json_error_body(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("POST", "/rest/api/3/issue/PROJ-1/transitions", status=502, text="<html>Bad Gateway</html>")

        with pytest.raises(JiraError) as exc_info:
            jira_client.transition_issue("PROJ-1", "31")

        error = exc_info.value
        assert error.status_code == 502
        assert error.details == {}
        assert error.body == "<html>Bad Gateway</html>"
        assert error.payload is None

    def test_json_error_body_that_is_not_an_object(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("POST", "/rest/api/3/issue/PROJ-1/transitions", status=400, json=["Transition is not valid"])

        with pytest.raises(JiraError) as exc_info:
            jira_client.transition_issue("PROJ-1", "31")

        error = exc_info.value
        assert error.details == {}
        assert error.payload == ["Transition is not valid"]

    def test_success_with_non_json_body(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("GET", "/rest/api/3/issue/PROJ-1/transitions", text="<html>SSO login</html>")

        with pytest.raises(JiraError) as exc_info:
            jira_client.get_transitions("PROJ-1")

        error = exc_info.value
        assert error.status_code == 200
        assert error.message.startswith("Invalid JSON response:")
        assert error.body == "<html>SSO login</html>"

    def test_transport_error(self, jira_config: JiraConfig):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with JiraClient(jira_config, transport=httpx.MockTransport(refuse)) as client:
            with pytest.raises(JiraError) as exc_info:
                client.get_transitions("PROJ-1")

        assert exc_info.value.status_code is None
        assert exc_info.value.message == "Request failed: Connection refused"

    def test_missing_url(self):
        client = JiraClient(JiraConfig(email="a@b.c", api_token="t"))
        with pytest.raises(JiraError, match="URL not configured"):
            client.get_transitions("PROJ-1")

    def test_missing_token(self):
        client = JiraClient(JiraConfig(url="https://test.atlassian.net", email="a@b.c"))
        with pytest.raises(AuthenticationError):
            client.get_transitions("PROJ-1")

    def test_close_resets_client(self, fake_jira: FakeJira, jira_client: JiraClient):
        fake_jira.on("GET", "/rest/api/3/issue/PROJ-1/transitions", json={"transitions": []})
        jira_client.get_transitions("PROJ-1")
        assert jira_client._client is not None

        jira_client.close()

        assert jira_client._client is None
