"""Application service answering repository listing queries."""

import logging
from typing import Any, Dict, List

from repo_lister.application.cache_manager import CacheManager
from repo_lister.application.cache_store import CacheStore
from repo_lister.application.query_pipeline import RepositoryQuery, apply_query
from repo_lister.config import Settings
from repo_lister.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)


class RepositoryService:
    """Service for listing and filtering the organization's repositories."""

    def __init__(self, cache_manager: CacheManager):
        """
        Initialize repository service.

        Args:
            cache_manager: Process-wide cache of the organization's repositories
        """
        self.cache_manager = cache_manager

    def list_all(self) -> List[Dict[str, Any]]:
        """
        List every cached repository in upstream order, in full shape.

        Raises:
            ServiceUnavailable: If repositories were never fetched successfully
        """
        return [repo.to_dict() for repo in self.cache_manager.get_current_data()]

    def filter_repositories(self, query: RepositoryQuery) -> List[Dict[str, Any]]:
        """
        Filter, sort, limit and project the cached repositories.

        Raises:
            ServiceUnavailable: If repositories were never fetched successfully
        """
        results = apply_query(self.cache_manager.get_current_data(), query)
        logger.debug(f"Query {query} matched {len(results)} repositories")
        return results


def build_service(settings: Settings) -> RepositoryService:
    """Wire the service for one process. Call once; the cache lives as long as the result."""
    client = GitHubRestClient(
        organization=settings.github_org,
        token=settings.github_token,
        api_url=settings.github_api_url,
    )
    store = CacheStore(ttl=settings.cache_ttl)
    return RepositoryService(CacheManager(client, store))
