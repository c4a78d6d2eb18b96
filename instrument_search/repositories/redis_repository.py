"""
Redis implementation of the query history repository.

Stores the history as a JSON array of strings under a single key.
"""

import json
from typing import List, Optional

import redis.asyncio as redis
import structlog

from .history_repository import IHistoryRepository

logger = structlog.get_logger(__name__)


class RedisHistoryRepository(IHistoryRepository):
    """
    Redis-backed history store.

    Values never expire; the list is rewritten in full on every save.
    """

    def __init__(self, redis_client: redis.Redis):
        """
        Initialize Redis repository.

        Args:
            redis_client: Async Redis client
        """
        self.redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisHistoryRepository":
        return cls(redis.from_url(url, decode_responses=True))

    async def load(self, key: str) -> Optional[List[str]]:
        """Load history from Redis."""
        raw = await self.redis.get(key)
        if raw is None:
            logger.debug("history_not_found", key=key)
            return None

        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("history_decode_failed", key=key, error=str(e))
            return None

        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            logger.warning("history_unexpected_format", key=key)
            return None

        return data

    async def save(self, key: str, entries: List[str]) -> None:
        """Save history to Redis."""
        await self.redis.set(key, json.dumps(entries))
        logger.debug("history_saved", key=key, entries=len(entries))

    async def close(self) -> None:
        await self.redis.aclose()
