"""Keeps the repository cache fresh and decides when to call GitHub."""

import logging
import threading
from typing import Optional, Tuple

from repo_lister.application.cache_store import CacheStore
from repo_lister.domain.fetcher import FetchError, UpstreamFetcher
from repo_lister.domain.repository import RepositoryRecord, Snapshot

logger = logging.getLogger(__name__)


class ServiceUnavailable(Exception):
    """Raised when no repositories were ever fetched and a fetch just failed."""
    pass


class _Refresh:
    """One in-flight upstream fetch shared by every caller that needs it."""

    def __init__(self):
        self.done = threading.Event()
        self.snapshot: Optional[Snapshot] = None
        self.error: Optional[Exception] = None


class CacheManager:
    """
    Serves repositories from the cache, refreshing it when it has expired.

    Concurrent callers that find the cache missing or expired share a single
    upstream fetch. When a refresh fails, the previous snapshot is served
    even if it has expired; only a cold start with a failing fetch raises
    ServiceUnavailable.
    """

    def __init__(self, fetcher: UpstreamFetcher, store: Optional[CacheStore] = None):
        """
        Initialize cache manager.

        Args:
            fetcher: Source of fresh repository listings
            store: Cache store to read from and publish to
        """
        self.fetcher = fetcher
        self.store = store or CacheStore()
        self._refresh: Optional[_Refresh] = None
        self._refresh_lock = threading.Lock()

    def get_current_data(self) -> Tuple[RepositoryRecord, ...]:
        """
        Get the current repositories, fetching them if the cache is not fresh.

        Returns:
            Repositories in upstream order

        Raises:
            ServiceUnavailable: If the fetch failed and nothing was cached before
        """
        snapshot, fresh = self.store.read()
        if fresh:
            logger.debug("Serving repositories from fresh cache")
            return snapshot.records

        refresh, leader = self._join_refresh()
        if leader:
            self._run_refresh(refresh)
        else:
            logger.debug("Waiting for in-flight repository refresh")
            refresh.done.wait()

        if refresh.snapshot is not None:
            return refresh.snapshot.records
        if isinstance(refresh.error, FetchError):
            return self._fallback(refresh.error)
        raise refresh.error

    def _join_refresh(self) -> Tuple[_Refresh, bool]:
        """Return the in-flight refresh, starting one if there is none."""
        with self._refresh_lock:
            if self._refresh is not None:
                return self._refresh, False

            # A refresh may have finished between our read and taking the lock
            snapshot, fresh = self.store.read()
            if fresh:
                finished = _Refresh()
                finished.snapshot = snapshot
                finished.done.set()
                return finished, False

            self._refresh = _Refresh()
            return self._refresh, True

    def _run_refresh(self, refresh: _Refresh) -> None:
        logger.info("Repository cache is missing or expired. Refreshing from GitHub...")
        try:
            records = self.fetcher.fetch()
            snapshot = Snapshot(records=tuple(records), fetched_at=self.store.clock())
            self.store.write(snapshot)
            refresh.snapshot = snapshot
            logger.info(f"Repository cache refreshed with {len(snapshot.records)} repositories")
        except Exception as e:
            refresh.error = e
        finally:
            with self._refresh_lock:
                self._refresh = None
            refresh.done.set()

    def _fallback(self, error: FetchError) -> Tuple[RepositoryRecord, ...]:
        stale, _ = self.store.read()
        if stale is None:
            logger.error(f"Failed to fetch repositories and no cached data is available: {error}")
            raise ServiceUnavailable("Error fetching repositories from GitHub.") from error

        logger.warning(
            f"Failed to refresh repositories ({error}). "
            f"Serving stale cache fetched at {stale.fetched_at.isoformat()}"
        )
        return stale.records
