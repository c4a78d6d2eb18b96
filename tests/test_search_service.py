"""
Tests for the instrument search service.

Covers:
- Search orchestration and history recording
- Blank queries
- History write failures surfaced as warnings
- Superseded searches
- Construction from settings
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from instrument_search.config import Settings
from instrument_search.domain.entities import MatchCategory
from instrument_search.domain.exceptions import HistoryPersistenceException
from instrument_search.repositories.redis_repository import RedisHistoryRepository
from instrument_search.search.ranking_engine import RankingEngine
from instrument_search.services.history_service import HistoryService
from instrument_search.services.search_service import InstrumentSearchService, SearchOutcome


@pytest.fixture
def search_service(engine, history):
    """Create search service over the sample corpus."""
    return InstrumentSearchService(engine=engine, history=history)


class TestSearch:
    """Test search orchestration."""

    @pytest.mark.asyncio
    async def test_returns_groups(self, search_service):
        outcome = await search_service.search("AAPL")

        assert isinstance(outcome, SearchOutcome)
        assert outcome.keywords == ("aapl",)
        assert outcome.groups[0].category is MatchCategory.SYMBOL
        assert outcome.groups[0].symbols == ["AAPL"]
        assert outcome.superseded is False
        assert outcome.history_warning is None

    @pytest.mark.asyncio
    async def test_records_history(self, search_service):
        await search_service.search("aapl")
        await search_service.search("  Health Care ")

        assert search_service.get_history() == ["Health Care", "aapl"]

    @pytest.mark.asyncio
    async def test_records_history_without_results(self, search_service):
        outcome = await search_service.search("zzzzzz")

        assert outcome.is_empty
        assert search_service.get_history() == ["zzzzzz"]

    @pytest.mark.asyncio
    async def test_blank_query(self, search_service):
        outcome = await search_service.search("   ")

        assert outcome.is_empty
        assert outcome.keywords == ()
        assert search_service.get_history() == []

    @pytest.mark.asyncio
    async def test_same_result_as_engine(self, search_service, engine):
        outcome = await search_service.search("technology")
        assert list(outcome.groups) == engine.search(["technology"])

    @pytest.mark.asyncio
    async def test_remove_history(self, search_service):
        await search_service.search("aapl")

        assert await search_service.remove_history("AAPL") is True
        assert search_service.get_history() == []

    @pytest.mark.asyncio
    async def test_to_dict(self, search_service):
        data = (await search_service.search("msft")).to_dict()

        assert data["query"] == "msft"
        assert data["keywords"] == ["msft"]
        assert data["groups"][0]["results"][0]["symbol"] == "MSFT"
        assert data["superseded"] is False


class TestHistoryFailure:
    """Test that history failures never break a search."""

    @pytest.mark.asyncio
    async def test_write_failure_returns_results_with_warning(
        self, engine, failing_repository
    ):
        service = InstrumentSearchService(engine, HistoryService(failing_repository))

        outcome = await service.search("aapl")

        assert outcome.groups[0].symbols == ["AAPL"]
        assert outcome.history_warning is not None
        assert "store unavailable" in outcome.history_warning
        assert service.get_history() == ["aapl"]

    @pytest.mark.asyncio
    async def test_remove_failure_raises(self, engine, failing_repository):
        history = HistoryService(failing_repository)
        service = InstrumentSearchService(engine, history)
        await service.search("aapl")

        with pytest.raises(HistoryPersistenceException):
            await service.remove_history("aapl")


class TestSuperseded:
    """Test last-writer-wins flagging of concurrent searches."""

    @pytest.mark.asyncio
    async def test_older_search_is_superseded(self, engine):
        release = asyncio.Event()
        repo = AsyncMock()
        repo.load.return_value = None

        async def slow_save(key, entries):
            # Hold the first write until the second search has started
            if entries == ["aapl"]:
                await release.wait()

        repo.save.side_effect = slow_save
        service = InstrumentSearchService(engine, HistoryService(repo))

        first = asyncio.create_task(service.search("aapl"))
        while not repo.save.called:
            await asyncio.sleep(0.01)

        second = asyncio.create_task(service.search("msft"))
        await asyncio.sleep(0.05)
        release.set()

        first_outcome, second_outcome = await asyncio.gather(first, second)

        assert first_outcome.superseded is True
        assert second_outcome.superseded is False
        assert first_outcome.groups[0].symbols == ["AAPL"]


class TestFromCorpus:
    """Test construction with settings."""

    def test_applies_settings(self, sample_corpus, history):
        settings = Settings(
            MAX_RESULTS_PER_GROUP=1, DESCRIPTION_FUZZY_MATCH=True, _env_file=None
        )
        service = InstrumentSearchService.from_corpus(sample_corpus, history, settings)

        assert isinstance(service.engine, RankingEngine)
        assert service.engine.max_results_per_group == 1
        assert service.engine.matcher.description_fuzzy is True
        assert service.history is history

    @pytest.mark.asyncio
    async def test_builds_redis_history_from_settings(self, sample_corpus):
        settings = Settings(
            REDIS_URL="redis://cache:6379/1",
            HISTORY_KEY="searches",
            HISTORY_CAPACITY=5,
            _env_file=None,
        )
        redis_mock = AsyncMock()
        with patch(
            "instrument_search.repositories.redis_repository.redis.from_url",
            return_value=redis_mock,
        ) as from_url:
            service = InstrumentSearchService.from_corpus(sample_corpus, settings=settings)

        from_url.assert_called_once_with("redis://cache:6379/1", decode_responses=True)
        assert isinstance(service.history.repository, RedisHistoryRepository)
        assert service.history.capacity == 5

        outcome = await service.search("aapl")

        assert outcome.history_warning is None
        redis_mock.set.assert_awaited_once_with("searches", '["aapl"]')
