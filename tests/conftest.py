"""
Test configuration and fixtures
"""

from unittest.mock import AsyncMock

import pytest

from instrument_search.domain.entities import (
    AuxiliaryIndex,
    Corpus,
    Instrument,
    InstrumentKind,
)
from instrument_search.repositories.history_repository import MemoryHistoryRepository
from instrument_search.search.ranking_engine import RankingEngine
from instrument_search.services.history_service import HistoryService


@pytest.fixture
def apple():
    """The stock used throughout the ranking scenarios."""
    return Instrument(
        symbol="AAPL",
        name="Apple Inc",
        kind=InstrumentKind.STOCK,
        tags=("Technology", "Consumer"),
        description1="maker of iPhone",
        description2="",
    )


@pytest.fixture
def sample_stocks(apple):
    """Small stock collection in corpus order"""
    return [
        apple,
        Instrument(
            symbol="MSFT",
            name="Microsoft Corporation",
            kind=InstrumentKind.STOCK,
            tags=("Technology", "Software", "Cloud"),
            description1="maker of windows and office",
            description2="azure cloud platform",
        ),
        Instrument(
            symbol="PFE",
            name="Pfizer Inc",
            kind=InstrumentKind.STOCK,
            tags=("Pharma", "Healthcare"),
            description1="global pharmaceutical company",
            description2="vaccines and medicines",
        ),
    ]


@pytest.fixture
def sample_etfs():
    """Small ETF collection in corpus order"""
    return [
        Instrument(
            symbol="QQQ",
            name="Invesco QQQ Trust",
            kind=InstrumentKind.ETF,
            tags=("Technology", "Index"),
            description1="tracks the nasdaq 100 index",
            description2="large cap growth",
        ),
        Instrument(
            symbol="XLV",
            name="Health Care Select Sector SPDR",
            kind=InstrumentKind.ETF,
            tags=("Healthcare", "Sector"),
            description1="health care sector fund",
            description2="",
        ),
    ]


@pytest.fixture
def sample_aux():
    """Auxiliary data; PFE and the ETFs have no market data on purpose"""
    return AuxiliaryIndex(
        market_data={
            "AAPL": (2_800_000_000_000, 28.4),
            "msft": (3_100_000_000_000, None),
        },
        compare_data={"AAPL": "AAPL vs MSFT +2.1%"},
        sectors={"Technology": ["AAPL", "MSFT"], "ETFs": ["QQQ", "XLV"]},
    )


@pytest.fixture
def sample_corpus(sample_stocks, sample_etfs, sample_aux):
    return Corpus(stocks=tuple(sample_stocks), etfs=tuple(sample_etfs), aux=sample_aux)


@pytest.fixture
def engine(sample_corpus):
    """Ranking engine over the sample corpus"""
    return RankingEngine.from_corpus(sample_corpus)


@pytest.fixture
def memory_repository():
    return MemoryHistoryRepository()


@pytest.fixture
def history(memory_repository):
    """History service backed by an in-memory store"""
    return HistoryService(memory_repository, key="history-test", capacity=10)


@pytest.fixture
def failing_repository():
    """Repository whose writes always fail"""
    repo = AsyncMock()
    repo.load.return_value = None
    repo.save.side_effect = ConnectionError("store unavailable")
    return repo
