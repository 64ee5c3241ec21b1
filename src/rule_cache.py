"""In-process TTL cache of rule tables keyed by financial year."""

import logging
import time
from collections.abc import Callable
from typing import NamedTuple

from config.settings import settings
from src.calculators.tax_data import RuleTableSet
from src.db.rule_store import RuleTableStore

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    value: RuleTableSet
    expires_at: float


class RuleTableCache:
    """Read-through cache in front of a RuleTableStore.

    Entries expire after ttl_seconds and are evicted lazily on the next
    access. Two concurrent misses for the same year may both hit the
    store; fetches are idempotent so the last write wins. Store errors
    propagate and nothing stale is served.
    """

    def __init__(
        self,
        store: RuleTableStore,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        if ttl_seconds is None:
            ttl_seconds = settings.rule_table_cache_ttl_hours * 3600
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    @property
    def store(self) -> RuleTableStore:
        return self._store

    async def get(self, financial_year: str) -> RuleTableSet:
        """Return the year's rule tables, fetching from the store on a miss."""
        entry = self._entries.get(financial_year)
        if entry is not None:
            if entry.expires_at > self._clock():
                return entry.value
            self._entries.pop(financial_year, None)
            logger.debug("Rule tables for %s expired", financial_year)

        logger.info("Rule table cache miss for %s, fetching from store", financial_year)
        value = await self._store.fetch_rule_table_set(financial_year)
        self._entries[financial_year] = _Entry(value, self._clock() + self._ttl)
        return value

    def invalidate(self, financial_year: str | None = None) -> None:
        """Drop one year, or every year when financial_year is None."""
        if financial_year is None:
            self._entries.clear()
        else:
            self._entries.pop(financial_year, None)

    def __len__(self) -> int:
        return len(self._entries)
