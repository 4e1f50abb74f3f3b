"""HTTP client for the GitHub REST API.

Only the two calls the linter needs: listing the files changed by a pull
request, and posting a comment on it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

import httpx


logger = logging.getLogger("clilint.forge")

DEFAULT_API_URL = "https://api.github.com"
FILES_PER_PAGE = 100


class ForgeError(Exception):
    """Raised when a GitHub API call fails."""
    pass


class ForgeConfigError(ForgeError):
    """Raised when the GitHub environment variables are missing or invalid."""
    pass


@dataclass(frozen=True)
class ForgeEnv:
    """Pull-request coordinates and credentials, read from the Actions environment."""

    token: str
    owner: str
    repo: str
    pr_number: int
    api_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ForgeEnv:
        """Build a ForgeEnv from environment variables.

        Reads GITHUB_TOKEN, INPUT_REPOSITORY (or GITHUB_REPOSITORY),
        INPUT_PR_NUMBER (or PR_NUMBER) and optionally GITHUB_API_URL.

        Raises:
            ForgeConfigError: If a required variable is missing or malformed.
        """
        if environ is None:
            environ = os.environ

        token = environ.get("GITHUB_TOKEN", "")
        if not token:
            raise ForgeConfigError("GITHUB_TOKEN environment variable is required")

        repository = environ.get("INPUT_REPOSITORY") or environ.get("GITHUB_REPOSITORY", "")
        if not repository:
            raise ForgeConfigError(
                "INPUT_REPOSITORY or GITHUB_REPOSITORY environment variable is required"
            )

        repo_path = repository.split("/")
        if len(repo_path) != 2 or not all(repo_path):
            raise ForgeConfigError(f"invalid repository format: {repository}")
        owner, repo = repo_path

        pr_number_str = environ.get("INPUT_PR_NUMBER") or environ.get("PR_NUMBER", "")
        if not pr_number_str:
            raise ForgeConfigError(
                "INPUT_PR_NUMBER or PR_NUMBER environment variable is required"
            )

        try:
            pr_number = int(pr_number_str)
        except ValueError as e:
            raise ForgeConfigError(f"invalid PR number: {e}") from e

        return cls(
            token=token,
            owner=owner,
            repo=repo,
            pr_number=pr_number,
            api_url=environ.get("GITHUB_API_URL") or DEFAULT_API_URL,
        )


class GitHubClient:
    """Minimal GitHub REST client.

    Usage::

        env = ForgeEnv.from_env()
        with GitHubClient(env) as client:
            files = client.list_pull_request_files()
            client.create_comment("Looks good")
    """

    def __init__(
        self,
        env: ForgeEnv,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._env = env
        self._client = httpx.Client(
            base_url=env.api_url,
            timeout=timeout,
            headers=self._auth_headers(),
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._env.token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and map transport and HTTP failures to ForgeError."""
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ForgeError(f"GitHub request timed out: {method} {url}: {e}") from e
        except httpx.HTTPError as e:
            raise ForgeError(f"Cannot reach GitHub at {self._env.api_url}: {e}") from e

        if response.status_code in (401, 403):
            raise ForgeError(
                f"GitHub authentication failed ({response.status_code}): "
                f"{response.text[:200]}"
            )

        if response.is_error:
            raise ForgeError(
                f"GitHub HTTP error {response.status_code} for {method} {url}: "
                f"{response.text[:500]}"
            )

        return response

    def list_pull_request_files(self) -> list[str]:
        """Return the paths of every file changed by the pull request.

        Follows the Link header until GitHub reports no next page.
        """
        env = self._env
        url = f"/repos/{env.owner}/{env.repo}/pulls/{env.pr_number}/files"
        params: dict[str, Any] | None = {"per_page": FILES_PER_PAGE}
        filenames: list[str] = []

        while url:
            response = self._request("GET", url, params=params)
            filenames.extend(item["filename"] for item in response.json())

            next_link = response.links.get("next")
            url = next_link["url"] if next_link else ""
            # The next link already carries the query string
            params = None

        logger.debug("Pull request #%d changes %d file(s)", env.pr_number, len(filenames))
        return filenames

    def create_comment(self, body: str) -> dict[str, Any]:
        """Post a comment on the pull request and return the created comment."""
        env = self._env
        url = f"/repos/{env.owner}/{env.repo}/issues/{env.pr_number}/comments"
        response = self._request("POST", url, json={"body": body})
        return response.json()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
