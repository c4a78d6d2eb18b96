"""
Recent query history.

Maintains a most-recently-used, case-insensitively deduplicated,
length-capped list of queries and writes it through to a repository
after every mutation.
"""

import asyncio
from typing import List, Optional

import redis.asyncio as redis
import structlog

from ..config import Settings, get_settings
from ..domain.exceptions import HistoryPersistenceException
from ..repositories.history_repository import IHistoryRepository
from ..repositories.redis_repository import RedisHistoryRepository

logger = structlog.get_logger(__name__)

DEFAULT_HISTORY_KEY = "stockSearchHistory"
DEFAULT_CAPACITY = 10
MAX_CAPACITY = 10


class HistoryService:
    """
    Ordered set of recent queries with a fixed capacity.

    Writes are serialized through an asyncio lock so concurrent searches
    can't lose updates to the capped list.
    """

    def __init__(
        self,
        repository: IHistoryRepository,
        key: str = DEFAULT_HISTORY_KEY,
        capacity: int = DEFAULT_CAPACITY,
    ):
        """
        Initialize history service.

        Args:
            repository: Persistent store for the list
            key: Key the list is stored under
            capacity: Maximum number of entries kept (1-10)
        """
        if not 1 <= capacity <= MAX_CAPACITY:
            raise ValueError(f"History capacity must be between 1 and {MAX_CAPACITY}")
        self.repository = repository
        self.key = key
        self.capacity = capacity
        self._entries: List[str] = []
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        redis_client: Optional[redis.Redis] = None,
    ) -> "HistoryService":
        """
        Build a Redis-backed history service from settings.

        Args:
            settings: Application settings; the cached settings are used if omitted
            redis_client: Existing async Redis client; one is created from
                REDIS_URL if omitted

        Returns:
            HistoryService using HISTORY_KEY and HISTORY_CAPACITY
        """
        settings = settings or get_settings()
        if redis_client is None:
            repository = RedisHistoryRepository.from_url(settings.REDIS_URL)
        else:
            repository = RedisHistoryRepository(redis_client)
        return cls(repository, key=settings.HISTORY_KEY, capacity=settings.HISTORY_CAPACITY)

    async def load(self) -> List[str]:
        """
        Read the persisted history into memory.

        Unreadable or missing data leaves the history empty. Stored lists
        longer than the capacity are truncated.

        Returns:
            The loaded entries, most-recent-first
        """
        try:
            stored = await self.repository.load(self.key)
        except Exception as e:
            logger.warning("history_load_failed", key=self.key, error=str(e))
            stored = None

        self._entries = list(stored or [])[: self.capacity]
        logger.info("history_loaded", key=self.key, entries=len(self._entries))
        return self.all()

    def all(self) -> List[str]:
        """Return a copy of the history, most-recent-first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    async def record(self, query: str) -> None:
        """
        Move a query to the front of the history.

        Blank queries are ignored. An existing entry equal ignoring case is
        replaced by the new spelling.

        Raises:
            HistoryPersistenceException: If the store write fails; the
                in-memory history is already updated
        """
        term = query.strip()
        if not term:
            return

        async with self._lock:
            index = self._find(term)
            if index is not None:
                del self._entries[index]
            self._entries.insert(0, term)
            del self._entries[self.capacity :]
            await self._persist("record")

    async def remove(self, query: str) -> bool:
        """
        Remove the first entry equal to query ignoring case.

        Returns:
            True if an entry was removed

        Raises:
            HistoryPersistenceException: If the store write fails
        """
        async with self._lock:
            index = self._find(query.strip())
            if index is None:
                return False
            del self._entries[index]
            await self._persist("remove")
            return True

    def _find(self, term: str) -> Optional[int]:
        folded = term.lower()
        for index, entry in enumerate(self._entries):
            if entry.lower() == folded:
                return index
        return None

    async def _persist(self, operation: str) -> None:
        try:
            await self.repository.save(self.key, list(self._entries))
        except Exception as e:
            logger.warning(
                "history_persist_failed", operation=operation, key=self.key, error=str(e)
            )
            raise HistoryPersistenceException(operation, str(e)) from e
