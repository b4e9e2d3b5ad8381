"""In-memory holder for the current repository snapshot."""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from repo_lister.domain.repository import Snapshot

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheStore:
    """
    Holds at most one snapshot and the window during which it is trusted.

    Publishing swaps a single reference, so readers see either the old
    snapshot or the new one, never a mix.
    """

    DEFAULT_TTL = timedelta(minutes=10)

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Callable[[], datetime] = utc_now):
        """
        Initialize an empty cache store.

        Args:
            ttl: How long a snapshot stays fresh after it was fetched
            clock: Returns the current time as an aware datetime
        """
        self.ttl = ttl
        self.clock = clock
        self._snapshot: Optional[Snapshot] = None
        self._lock = threading.Lock()

    def read(self) -> Tuple[Optional[Snapshot], bool]:
        """Return the current snapshot (or None) and whether it is fresh."""
        with self._lock:
            snapshot = self._snapshot
        return snapshot, self.is_fresh(snapshot)

    def write(self, snapshot: Snapshot) -> None:
        """Replace the current snapshot."""
        with self._lock:
            self._snapshot = snapshot
        logger.debug(f"Published snapshot of {len(snapshot.records)} repositories fetched at {snapshot.fetched_at}")

    def is_fresh(self, snapshot: Optional[Snapshot]) -> bool:
        if snapshot is None:
            return False
        return self.clock() < snapshot.fetched_at + self.ttl
