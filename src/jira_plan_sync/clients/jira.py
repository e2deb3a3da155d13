"""Jira Cloud API client using httpx."""

import base64
from typing import Any

import httpx

from jira_plan_sync.config import JiraConfig
from jira_plan_sync.core.exceptions import AuthenticationError, JiraError
from jira_plan_sync.core.logging import StructuredLogger
from jira_plan_sync.core.utils import adf_document

logger = StructuredLogger(__name__)


class JiraClient:
    """Client for Jira Cloud REST API."""

    def __init__(
        self,
        config: JiraConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return (self._config.url or "").rstrip("/")

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            if not self._config.url:
                raise JiraError("Jira URL not configured")
            if not self._config.email:
                raise AuthenticationError("Jira email not configured")
            if not self._config.api_token:
                raise AuthenticationError("Jira API token not configured")

            # Jira Cloud uses Basic Auth with email:api_token
            credentials = base64.b64encode(
                f"{self._config.email}:{self._config.api_token}".encode()
            ).decode()

            headers = {
                "Authorization": f"Basic {credentials}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }

            self._client = httpx.Client(
                base_url=self.base_url,
                headers=headers,
                timeout=self._config.timeout,
                transport=self._transport,
            )

            logger.debug("Created Jira client", url=self.base_url)

        return self._client

    def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> Any:
        """Make an API request.

        Args:
            method: HTTP method
            path: API path
            **kwargs: Additional request arguments

        Returns:
            Response JSON data, or None for an empty body

        Raises:
            JiraError: on a non-2xx response or a transport failure
        """
        logger.debug("Jira request", method=method, path=path)
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise JiraError(
                    f"Invalid JSON response: {e}",
                    status_code=response.status_code,
                    body=response.text,
                )

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            body = e.response.text
            try:
                error_data = e.response.json()
            except ValueError:
                error_data = None

            if isinstance(error_data, dict):
                messages = error_data.get("errorMessages", [])
                errors = error_data.get("errors", {})
                if messages:
                    message = "; ".join(messages)
                elif errors:
                    message = "; ".join(f"{k}: {v}" for k, v in errors.items())
                else:
                    message = f"HTTP {status_code}"
            else:
                message = body or f"HTTP {status_code}"

            raise JiraError(
                message,
                status_code=status_code,
                details=error_data if isinstance(error_data, dict) else None,
                body=body,
                payload=error_data,
            )

        except httpx.RequestError as e:
            raise JiraError(f"Request failed: {e}")

    def get(self, path: str, **kwargs: Any) -> Any:
        """Make a GET request."""
        return self._request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        """Make a POST request."""
        return self._request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        """Make a PUT request."""
        return self._request("PUT", path, **kwargs)

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # Issue operations
    def get_issue(self, issue_key: str, fields: list[str] | None = None) -> dict[str, Any]:
        """Get issue by key."""
        params: dict[str, Any] = {}
        if fields:
            params["fields"] = ",".join(fields)
        return self.get(f"/rest/api/3/issue/{issue_key}", params=params)

    def search_issues(
        self,
        jql: str,
        max_results: int = 50,
        fields: list[str] | None = None,
    ) -> dict[str, Any]:
        """Search issues using JQL."""
        payload: dict[str, Any] = {"jql": jql}
        if fields:
            payload["fields"] = fields
        payload["maxResults"] = max_results
        return self.post("/rest/api/3/search/jql", json=payload)

    def create_issue(
        self,
        project_key: str,
        summary: str,
        issue_type: str = "Task",
        description: str | None = None,
        labels: list[str] | None = None,
        parent_key: str | None = None,
    ) -> dict[str, Any]:
        """Create a new issue.

        ``description`` is sent whenever it is not None, including the
        empty string, so a work item always carries an ADF description.
        """
        fields: dict[str, Any] = {
            "project": {"key": project_key},
            "summary": summary,
            "issuetype": {"name": issue_type},
        }

        if parent_key:
            fields["parent"] = {"key": parent_key}

        if description is not None:
            fields["description"] = adf_document(description)

        if labels:
            fields["labels"] = labels

        return self.post("/rest/api/3/issue", json={"fields": fields})

    def update_issue(self, issue_key: str, fields: dict[str, Any]) -> None:
        """Update fields of an issue. A None value clears the field."""
        self.put(f"/rest/api/3/issue/{issue_key}", json={"fields": fields})

    def transition_issue(self, issue_key: str, transition_id: str) -> None:
        """Transition an issue to a new status."""
        payload = {"transition": {"id": transition_id}}
        self.post(f"/rest/api/3/issue/{issue_key}/transitions", json=payload)

    def get_transitions(self, issue_key: str) -> dict[str, Any]:
        """Get the transitions payload for an issue."""
        return self.get(f"/rest/api/3/issue/{issue_key}/transitions") or {}

    def add_comment(self, issue_key: str, body: str) -> dict[str, Any]:
        """Add a comment to an issue."""
        payload = {"body": adf_document(body)}
        return self.post(f"/rest/api/3/issue/{issue_key}/comment", json=payload)
