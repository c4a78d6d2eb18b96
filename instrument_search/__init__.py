"""
In-memory fuzzy search and ranking for stocks and ETFs.

Matches a free-text query against symbol, name, tags and description of
every instrument, groups matches by the field that matched and orders the
groups by relevance.
"""

from .domain.entities import (
    AuxiliaryIndex,
    AuxiliaryInfo,
    Corpus,
    Instrument,
    InstrumentKind,
    MatchCategory,
    ResultGroup,
    ScoredResult,
)
from .models import build_corpus
from .search import RankingEngine, tokenize
from .services.history_service import HistoryService
from .services.search_service import InstrumentSearchService, SearchOutcome

__version__ = "0.1.0"

__all__ = [
    "AuxiliaryIndex",
    "AuxiliaryInfo",
    "Corpus",
    "HistoryService",
    "Instrument",
    "InstrumentKind",
    "InstrumentSearchService",
    "MatchCategory",
    "RankingEngine",
    "ResultGroup",
    "ScoredResult",
    "SearchOutcome",
    "build_corpus",
    "tokenize",
]
