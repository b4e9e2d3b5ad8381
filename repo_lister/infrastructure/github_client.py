"""GitHub REST API client for listing an organization's repositories."""

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from repo_lister.domain.fetcher import FetchError
from repo_lister.domain.repository import Owner, RepositoryRecord

logger = logging.getLogger(__name__)


class GitHubRestClient:
    """Client for the GitHub REST organization repositories endpoint."""

    # Single page only; GitHub caps per_page at 100
    PER_PAGE = 100
    REQUEST_TIMEOUT_SECONDS = 30
    USER_AGENT = "GitHubRepoListerAPI/1.0"

    def __init__(
        self,
        organization: str,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub REST client.

        Args:
            organization: Organization whose repositories are listed
            token: GitHub personal access token. If None, uses GITHUB_TOKEN env var.
            api_url: Base URL of the GitHub REST API
            session: Optional requests session to send requests through
        """
        if token is None:
            token = os.getenv("GITHUB_TOKEN")

        self.organization = organization
        self.token = token
        self.endpoint = f"{api_url.rstrip('/')}/orgs/{organization}/repos"
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.USER_AGENT,
        }

        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"
        else:
            logger.warning("GitHub token not found. Set GITHUB_TOKEN to avoid low rate limits.")

    def fetch(self) -> List[RepositoryRecord]:
        """
        Fetch one page of the organization's repositories.

        Returns:
            Repositories in the order GitHub returned them

        Raises:
            FetchError: If the request fails, returns a non-success status,
                or the body does not decode into repositories
        """
        logger.info(f"Fetching repositories for organization '{self.organization}'")
        try:
            response = self.session.get(
                self.endpoint,
                params={"per_page": self.PER_PAGE},
                headers=self.headers,
                timeout=self.REQUEST_TIMEOUT_SECONDS,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request to {self.endpoint} failed: {e}") from e

        if not response.ok:
            raise FetchError(
                f"GitHub returned status {response.status_code} for {self.endpoint}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Response body is not valid JSON: {e}", status_code=response.status_code) from e

        if not isinstance(payload, list):
            raise FetchError(
                f"Expected a JSON array of repositories, got {type(payload).__name__}",
                status_code=response.status_code,
            )

        repositories = [self._parse_repository(item) for item in payload]
        logger.info(f"Fetched {len(repositories)} repositories for '{self.organization}'")
        return repositories

    @staticmethod
    def _parse_repository(item: Any) -> RepositoryRecord:
        """Decode one element of the listing into a record."""
        if not isinstance(item, dict):
            raise FetchError(f"Expected a repository object, got {type(item).__name__}")

        try:
            full_name = item["full_name"]
            owner: Dict[str, Any] = item["owner"] or {}
            avatar_url = owner.get("avatar_url")
            created_at = datetime.fromisoformat(item["created_at"].replace("Z", "+00:00"))
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise FetchError(f"Malformed repository entry: {e!r}") from e

        if not isinstance(full_name, str):
            raise FetchError(f"Malformed repository entry: full_name is {type(full_name).__name__}")

        # GitHub sends null for repositories without a description or language
        return RepositoryRecord(
            full_name=full_name,
            description=_optional_str(item.get("description"), "description", full_name),
            language=_optional_str(item.get("language"), "language", full_name),
            created_at=created_at,
            owner=Owner(avatar_url=_optional_str(avatar_url, "owner.avatar_url", full_name)),
        )


def _optional_str(value: Any, field: str, full_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise FetchError(f"Malformed repository entry {full_name}: {field} is {type(value).__name__}")
    return value
