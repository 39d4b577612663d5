"""Create or update the pull request for an update branch."""

from __future__ import annotations

from typing import Any

import requests
from requests import Response
from tenacity import retry, stop_after_attempt, wait_fixed

API_URL = "https://api.github.com"


class ForgeError(RuntimeError):
    """Raised when the forge API cannot be reached or rejects a request."""


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github+json",
    }


@retry(reraise=True, stop=stop_after_attempt(3), wait=wait_fixed(2))
def _list_open_pulls(url: str, head: str, headers: dict[str, str]) -> Response:
    return requests.get(
        url,
        params={"state": "open", "head": head, "per_page": 50},
        headers=headers,
        timeout=10,
    )


def _checked(response: Response) -> Any:
    if not response.ok:
        raise ForgeError(f"Unexpected status code {response.status_code} from {response.url}")
    return response.json()


def ensure_pull_request(
    *,
    repository: str,
    token: str,
    head: str,
    base: str,
    title: str,
    body: str,
) -> str:
    """Create or update the open pull request for ``head`` and return its HTML URL.

    ``head`` uses the API's ``owner:branch`` form, e.g.
    ``"someone:auto-update/hello"``.
    """
    base_url = f"{API_URL}/repos/{repository}/pulls"
    headers = _headers(token)

    try:
        existing = _checked(_list_open_pulls(base_url, head, headers))
        target = existing[0] if isinstance(existing, list) and existing else None

        if target:
            patch = requests.patch(
                target.get("url"),
                json={"title": title, "body": body},
                headers=headers,
                timeout=10,
            )
            return _checked(patch).get("html_url", "")

        post = requests.post(
            base_url,
            json={"title": title, "body": body, "head": head, "base": base},
            headers=headers,
            timeout=10,
        )
        return _checked(post).get("html_url", "")
    except requests.RequestException as exc:
        raise ForgeError(f"Failed to reach forge API: {exc}") from exc
