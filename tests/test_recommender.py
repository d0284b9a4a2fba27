"""Tests for the recommendation orchestrator."""

import asyncio

import pytest

from librec.adapters.recommender.hybrid import HybridRecommenderAdapter
from librec.adapters.store.memory import InMemoryLibraryStore
from librec.domain.records import Reader
from librec.services.history import HistoryReader

from tests.conftest import Library, book


async def test_content_only_scenario(make_store, content_library):
    recommender = HybridRecommenderAdapter(await make_store(content_library))

    items = await recommender.recommend(1, 1)

    assert [i.item_id for i in items] == [3]


async def test_hybrid_ranking_keeps_score_order(make_store, hybrid_library):
    recommender = HybridRecommenderAdapter(await make_store(hybrid_library))

    results = await recommender.recommend_scored(1, 10)

    assert [r.item.item_id for r in results] == [4, 6, 5]
    assert [r.score for r in results] == pytest.approx([0.82, 0.35, 0.1])
    assert [r.reason for r in results] == ["hybrid", "collaborative", "content"]


async def test_limit_takes_top_scores(make_store, hybrid_library):
    recommender = HybridRecommenderAdapter(await make_store(hybrid_library))
    items = await recommender.recommend(1, 2)
    assert [i.item_id for i in items] == [4, 6]


async def test_sequential_scoring_matches_concurrent(make_store, hybrid_library):
    store = await make_store(hybrid_library)
    concurrent = await HybridRecommenderAdapter(store).recommend(1)
    sequential = await HybridRecommenderAdapter(store, concurrent_scoring=False).recommend(1)
    assert sequential == concurrent


async def test_history_never_recommended(make_store, hybrid_library):
    store = await make_store(hybrid_library)
    recommender = HybridRecommenderAdapter(store)
    for reader_id in (1, 2, 3, 4):
        history = {i.item_id for i in await HistoryReader(store, store).history(reader_id)}
        recommended = {i.item_id for i in await recommender.recommend(reader_id)}
        assert history
        assert not history & recommended


async def test_cold_start_uses_category_popularity(make_store, hybrid_library):
    recommender = HybridRecommenderAdapter(await make_store(hybrid_library))

    results = await recommender.recommend_scored(5)

    assert [r.item.item_id for r in results] == [1, 2, 4]
    assert [r.score for r in results] == [5.0, 3.0, 2.0]
    assert all(r.item.category_id == 1 for r in results)


async def test_history_without_signal_is_empty(make_store, hybrid_library):
    # no popularity fallback once the reader has history
    recommender = HybridRecommenderAdapter(await make_store(hybrid_library))
    assert await recommender.recommend(6) == []


async def test_unknown_reader(make_store, hybrid_library):
    recommender = HybridRecommenderAdapter(await make_store(hybrid_library))
    assert await recommender.recommend(999) == []


async def test_no_history_and_no_category(make_store):
    library = Library(items=[book(1, 1, "A")], readers=[Reader(1), Reader(2)], borrows=[(2, 1)])
    recommender = HybridRecommenderAdapter(await make_store(library))
    assert await recommender.recommend(1) == []


async def test_default_limits(make_store, hybrid_library):
    recommender = HybridRecommenderAdapter(
        await make_store(hybrid_library), default_limit=1, default_similar_limit=1
    )
    assert [i.item_id for i in await recommender.recommend(1)] == [4]
    assert len(await recommender.similar(1)) == 1


async def test_similar_through_recommender(make_store, similarity_library):
    recommender = HybridRecommenderAdapter(await make_store(similarity_library))
    assert [i.item_id for i in await recommender.similar(1, 5)] == [2, 3, 4]
    assert await recommender.similar(404) == []


async def test_non_positive_limit_rejected(make_store, hybrid_library):
    recommender = HybridRecommenderAdapter(await make_store(hybrid_library))
    with pytest.raises(ValueError):
        await recommender.recommend(1, 0)
    with pytest.raises(ValueError):
        await recommender.similar(1, -1)


class _FailingStore(InMemoryLibraryStore):
    async def item_borrower_counts(self, reader_ids, exclude_item_ids):
        raise RuntimeError("loan store unavailable")


async def test_store_failure_propagates(hybrid_library):
    store = _FailingStore(
        hybrid_library.items, hybrid_library.copies, hybrid_library.readers, hybrid_library.loans
    )
    recommender = HybridRecommenderAdapter(store)
    with pytest.raises(RuntimeError, match="loan store unavailable"):
        await recommender.recommend(1)


class _SlowCatalogFailingLoans(InMemoryLibraryStore):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.completed = []

    async def find_neighbors(self, reader_id, seed_item_ids, min_overlap, limit):
        raise RuntimeError("loan store unavailable")

    async def find_related(self, category_ids, authors, exclude_ids, limit=None):
        await asyncio.sleep(0.05)
        self.completed.append("find_related")
        return await super().find_related(category_ids, authors, exclude_ids, limit)


async def test_store_failure_cancels_other_scorer(hybrid_library):
    store = _SlowCatalogFailingLoans(
        hybrid_library.items, hybrid_library.copies, hybrid_library.readers, hybrid_library.loans
    )
    recommender = HybridRecommenderAdapter(store)

    with pytest.raises(RuntimeError, match="loan store unavailable"):
        await recommender.recommend(1)
    await asyncio.sleep(0.2)

    assert store.completed == []
