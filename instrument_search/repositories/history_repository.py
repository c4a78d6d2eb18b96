"""
Query history repository interface (Abstract Base Class).

Defines the contract for persisting the query history list independent of
the underlying key-value store.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class IHistoryRepository(ABC):
    """
    Abstract repository for an ordered list of strings stored under a key.

    Implementations must round-trip order and length exactly. Failures are
    raised to the caller, never swallowed.
    """

    @abstractmethod
    async def load(self, key: str) -> Optional[List[str]]:
        """
        Load the list stored under key.

        Args:
            key: Storage key

        Returns:
            Stored list, or None when nothing has been stored yet
        """
        pass

    @abstractmethod
    async def save(self, key: str, entries: List[str]) -> None:
        """
        Replace the list stored under key.

        Args:
            key: Storage key
            entries: Entries, most-recent-first
        """
        pass


class MemoryHistoryRepository(IHistoryRepository):
    """
    In-process history store.

    Keeps copies of the saved lists so callers can't mutate stored state.
    """

    def __init__(self, initial: Optional[Dict[str, List[str]]] = None):
        self._data: Dict[str, List[str]] = {
            key: list(value) for key, value in (initial or {}).items()
        }

    async def load(self, key: str) -> Optional[List[str]]:
        entries = self._data.get(key)
        return list(entries) if entries is not None else None

    async def save(self, key: str, entries: List[str]) -> None:
        self._data[key] = list(entries)
