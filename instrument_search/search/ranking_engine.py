"""
Ranking engine for grouped instrument search.

Runs the category matcher over every instrument for each match category,
builds one result group per category with qualifying instruments, and
orders the groups so the most relevant surface first.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from ..domain.entities import (
    AuxiliaryIndex,
    Corpus,
    Instrument,
    InstrumentKind,
    MatchCategory,
    ResultGroup,
    ScoredResult,
)
from .category_matcher import CategoryMatcher

logger = structlog.get_logger(__name__)


class RankingEngine:
    """
    Deterministic multi-category search over a read-only corpus.

    Ordering:
    1. Results inside a group - score descending, corpus order on ties
    2. Groups - highest score descending, category priority on ties

    The engine holds no mutable state, so concurrent searches need no locking.
    """

    def __init__(
        self,
        stocks: Sequence[Instrument] = (),
        etfs: Sequence[Instrument] = (),
        aux: Optional[AuxiliaryIndex] = None,
        matcher: Optional[CategoryMatcher] = None,
        max_results_per_group: Optional[int] = None,
    ):
        """
        Initialize ranking engine.

        Args:
            stocks: Stock instruments in corpus order
            etfs: ETF instruments in corpus order
            aux: Auxiliary display data index
            matcher: Category matcher (default settings if omitted)
            max_results_per_group: Optional cap applied after sorting
        """
        # Collection membership decides the kind
        self.stocks: Tuple[Instrument, ...] = tuple(
            replace(item, kind=InstrumentKind.STOCK) if item.is_etf else item for item in stocks
        )
        self.etfs: Tuple[Instrument, ...] = tuple(
            item if item.is_etf else replace(item, kind=InstrumentKind.ETF) for item in etfs
        )
        self.aux = aux or AuxiliaryIndex()
        self.matcher = matcher or CategoryMatcher()
        self.max_results_per_group = max_results_per_group

        self._pools: Dict[MatchCategory, Tuple[Instrument, ...]] = {
            MatchCategory.SYMBOL: self.stocks + self.etfs,
            MatchCategory.NAME: self.stocks + self.etfs,
            MatchCategory.STOCK_TAG: self.stocks,
            MatchCategory.ETF_TAG: self.etfs,
            MatchCategory.DESCRIPTION: self.stocks + self.etfs,
        }

    @classmethod
    def from_corpus(cls, corpus: Corpus, **kwargs) -> "RankingEngine":
        return cls(stocks=corpus.stocks, etfs=corpus.etfs, aux=corpus.aux, **kwargs)

    def search(self, keywords: Sequence[str]) -> List[ResultGroup]:
        """
        Search all categories for instruments matching every keyword.

        Args:
            keywords: Lowercased keywords (see ``tokenize``)

        Returns:
            Non-empty result groups in display order; empty list when there
            are no keywords or nothing matched
        """
        if not keywords:
            return []

        groups = []
        for category in MatchCategory:
            group = self.search_category(keywords, category)
            if group is not None:
                groups.append(group)

        groups.sort(key=lambda g: (-g.highest_score, -g.category.priority))

        logger.debug(
            "ranking_completed",
            keywords=list(keywords),
            groups=[g.category.key for g in groups],
            total_results=sum(len(g.results) for g in groups),
        )
        return groups

    def search_category(
        self, keywords: Sequence[str], category: MatchCategory
    ) -> Optional[ResultGroup]:
        """
        Build the result group for one category.

        Returns:
            ResultGroup, or None when no instrument qualifies
        """
        matches: List[Tuple[Instrument, int]] = []
        for instrument in self._pools[category]:
            score = self.matcher.match(instrument, keywords, category)
            if score is not None:
                matches.append((instrument, score))

        if not matches:
            return None

        # list.sort is stable, so equal scores keep corpus order
        matches.sort(key=lambda m: m[1], reverse=True)
        highest_score = matches[0][1]

        if self.max_results_per_group is not None:
            matches = matches[: self.max_results_per_group]

        results = tuple(
            ScoredResult.build(instrument, score, self.aux.get(instrument.symbol))
            for instrument, score in matches
        )
        return ResultGroup(category=category, results=results, highest_score=highest_score)

    def get_stats(self) -> dict:
        """
        Get engine corpus statistics.

        Returns:
            Dictionary with corpus sizes and settings
        """
        return {
            "stocks": len(self.stocks),
            "etfs": len(self.etfs),
            "aux_entries": len(self.aux),
            "max_results_per_group": self.max_results_per_group,
            "description_fuzzy": self.matcher.description_fuzzy,
        }
