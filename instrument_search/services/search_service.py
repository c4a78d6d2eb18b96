"""
Business logic service layer.

Orchestrates a search: tokenizes the query, runs the ranking engine off the
event loop, and records the query in the history.
"""

import asyncio
import itertools
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from ..config import Settings, get_settings
from ..domain.entities import Corpus, ResultGroup
from ..domain.exceptions import HistoryPersistenceException
from ..logging_config import bind_search_id, clear_search_id
from ..search.category_matcher import CategoryMatcher
from ..search.ranking_engine import RankingEngine
from ..search.tokenizer import tokenize
from .history_service import HistoryService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SearchOutcome:
    """
    Result of one search call.

    Attributes:
        query: The raw query text
        keywords: Tokens the query was split into
        groups: Ordered result groups
        superseded: True when a newer search was issued before this finished
        history_warning: Set when the history could not be persisted
    """

    query: str
    keywords: Tuple[str, ...] = ()
    groups: Tuple[ResultGroup, ...] = ()
    superseded: bool = False
    history_warning: Optional[str] = field(default=None)

    @property
    def is_empty(self) -> bool:
        return not self.groups

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            "query": self.query,
            "keywords": list(self.keywords),
            "groups": [group.to_dict() for group in self.groups],
            "superseded": self.superseded,
            "history_warning": self.history_warning,
        }


class InstrumentSearchService:
    """
    Search service over a read-only corpus.

    The ranking engine is pure; each call runs it in a worker thread and
    returns all groups at once. Searches are not cancelled: a call that
    finishes after a newer one was issued is flagged ``superseded`` so the
    caller can discard it.
    """

    def __init__(self, engine: RankingEngine, history: HistoryService):
        """
        Initialize search service.

        Args:
            engine: Ranking engine over the corpus
            history: Query history manager
        """
        self.engine = engine
        self.history = history
        self._sequence = itertools.count(1)
        self._latest = 0

    @classmethod
    def from_corpus(
        cls,
        corpus: Corpus,
        history: Optional[HistoryService] = None,
        settings: Optional[Settings] = None,
    ) -> "InstrumentSearchService":
        """
        Build the service with ranking options taken from settings.

        Without an explicit history, a Redis-backed one is built from
        REDIS_URL, HISTORY_KEY and HISTORY_CAPACITY.
        """
        settings = settings or get_settings()
        if history is None:
            history = HistoryService.from_settings(settings)
        engine = RankingEngine.from_corpus(
            corpus,
            matcher=CategoryMatcher(description_fuzzy=settings.DESCRIPTION_FUZZY_MATCH),
            max_results_per_group=settings.MAX_RESULTS_PER_GROUP,
        )
        return cls(engine=engine, history=history)

    async def search(self, query: str) -> SearchOutcome:
        """
        Search the corpus.

        A blank query returns an empty outcome and leaves the history
        untouched. A history write failure is reported through
        ``history_warning`` and never affects the returned groups.

        Args:
            query: Raw query text

        Returns:
            SearchOutcome with ordered result groups
        """
        keywords = tokenize(query)
        if not keywords:
            return SearchOutcome(query=query)

        sequence = next(self._sequence)
        self._latest = sequence
        bind_search_id()
        start_time = time.time()

        try:
            groups = await asyncio.to_thread(self.engine.search, keywords)

            history_warning = None
            try:
                await self.history.record(query)
            except HistoryPersistenceException as e:
                history_warning = e.message

            superseded = sequence != self._latest
            logger.info(
                "search_completed",
                keywords=keywords,
                groups=len(groups),
                results=sum(len(g.results) for g in groups),
                superseded=superseded,
                duration_ms=round((time.time() - start_time) * 1000, 2),
            )
            return SearchOutcome(
                query=query,
                keywords=tuple(keywords),
                groups=tuple(groups),
                superseded=superseded,
                history_warning=history_warning,
            )
        finally:
            clear_search_id()

    def get_history(self) -> List[str]:
        return self.history.all()

    async def remove_history(self, query: str) -> bool:
        """
        Remove a query from the history.

        Raises:
            HistoryPersistenceException: If the store write fails
        """
        return await self.history.remove(query)
