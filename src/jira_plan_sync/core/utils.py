"""Common utilities for jira-plan-sync."""

from typing import Any


def adf_document(text: str) -> dict[str, Any]:
    """Wrap plain text in an Atlassian Document Format document.

    Jira Cloud v3 takes rich text (descriptions, comments) as ADF; a
    single paragraph holding one text node is the plain-text form.
    """
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}],
            }
        ],
    }
