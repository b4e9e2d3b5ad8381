"""Contract for the upstream source of repository records."""

from typing import List, Optional, Protocol

from repo_lister.domain.repository import RepositoryRecord


class FetchError(Exception):
    """Raised when the upstream listing cannot be fetched or decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamFetcher(Protocol):
    """Anything that can produce one page of the organization's repositories."""

    def fetch(self) -> List[RepositoryRecord]:
        """
        Fetch the current repository listing.

        Returns:
            Records in upstream order. An empty list is a valid result.

        Raises:
            FetchError: On a non-success status, transport failure or
                an undecodable response body.
        """
        ...
