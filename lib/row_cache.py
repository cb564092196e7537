"""
Time-boxed cache for the last full fetch.

Replaces per-call sheet reads within a short window, since the
spreadsheet backend is rate-limited.
"""
import logging
import time
from typing import Callable

from config import CACHE_TTL_SECONDS
from lib.types import Row

logger = logging.getLogger(__name__)


class RowCache:
    """
    Single-entry cache of the full row list.

    Usage:
        cache = RowCache()

        rows = cache.get()
        if rows is None:
            rows = ...  # read backend
            cache.put(rows)

        # After a successful mutation
        cache.invalidate()

    The entry is all-or-nothing: there is no per-row invalidation.
    Rows are copied on put and on get, so callers cannot mutate the
    cached entry.
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize cache with TTL.

        Args:
            ttl_seconds: Validity window after put() (default 30 seconds)
            clock: Monotonic seconds source; tests pass a fake clock
        """
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._rows: list[Row] | None = None
        self._fetched_at: float | None = None
        self._generation = 0

    @property
    def ttl_seconds(self) -> float:
        """Get configured TTL in seconds."""
        return self._ttl_seconds

    @property
    def fetched_at(self) -> float | None:
        """Clock reading of the last put(), or None when empty."""
        return self._fetched_at

    @property
    def generation(self) -> int:
        """
        Counter bumped by every invalidate().

        A reader that started before a mutation compares it against the
        value it saw first and drops its result if they differ.
        """
        return self._generation

    @property
    def is_valid(self) -> bool:
        """True while an entry exists and is younger than the TTL."""
        if self._rows is None or self._fetched_at is None:
            return False
        return self._clock() - self._fetched_at < self._ttl_seconds

    def get(self) -> list[Row] | None:
        """
        Get cached rows.

        Returns:
            A copy of the cached rows, or None on miss (empty or expired)
        """
        if not self.is_valid:
            if self._rows is not None:
                logger.debug("Row cache expired")
                self._drop()
            return None
        logger.debug(f"Row cache hit ({len(self._rows)} rows)")
        return [dict(r) for r in self._rows]

    def put(self, rows: list[Row]) -> None:
        """Replace the entry and stamp it with the current clock reading."""
        self._rows = [dict(r) for r in rows]
        self._fetched_at = self._clock()
        logger.debug(f"Row cache stored {len(rows)} rows")

    def _drop(self) -> None:
        self._rows = None
        self._fetched_at = None

    def invalidate(self) -> None:
        """Drop the entry after a mutation; the next get() is a miss."""
        self._drop()
        self._generation += 1
