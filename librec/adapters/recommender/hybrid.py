"""Hybrid recommender: collaborative + content scoring with a cold-start path."""

import asyncio
import logging

from librec.domain.records import Item, RecommendationResult, ScoreMap
from librec.domain.weights import COLLABORATIVE_WEIGHT, CONTENT_WEIGHT
from librec.ports.recommender import RecommenderPort
from librec.ports.stores import LibraryStore
from librec.services.cold_start import ColdStartFallback
from librec.services.collaborative import CollaborativeScorer
from librec.services.content import ContentScorer
from librec.services.fusion import fuse, rank
from librec.services.history import HistoryReader
from librec.services.similarity import ItemSimilarityEngine

logger = logging.getLogger(__name__)

REASON_COLLABORATIVE = "collaborative"
REASON_CONTENT = "content"
REASON_HYBRID = "hybrid"


def _reason(item_id: int, collaborative: ScoreMap, content: ScoreMap) -> str:
    if item_id in collaborative and item_id in content:
        return REASON_HYBRID
    if item_id in collaborative:
        return REASON_COLLABORATIVE
    return REASON_CONTENT


def _check_limit(limit: int) -> None:
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")


class HybridRecommenderAdapter(RecommenderPort):
    """
    Recommendation orchestrator.

    Readers with history get a COLLABORATIVE_WEIGHT / CONTENT_WEIGHT blend of
    the two scorers. Readers without history get the most borrowed books in
    their category. When history exists but neither scorer finds anything the
    result is empty: popularity is used for cold start only.
    """

    def __init__(
        self,
        store: LibraryStore,
        default_limit: int = 10,
        default_similar_limit: int = 5,
        concurrent_scoring: bool = True,
    ) -> None:
        self._store = store
        self._history = HistoryReader(store, store)
        self._content = ContentScorer(store)
        self._collaborative = CollaborativeScorer(store)
        self._cold_start = ColdStartFallback(store)
        self._similarity = ItemSimilarityEngine(store)
        self._default_limit = default_limit
        self._default_similar_limit = default_similar_limit
        self._concurrent = concurrent_scoring

    async def _score(self, reader_id: int, history: set[Item]) -> tuple[ScoreMap, ScoreMap]:
        if self._concurrent:
            tasks = [
                asyncio.ensure_future(self._collaborative.score(reader_id, history)),
                asyncio.ensure_future(self._content.score(history)),
            ]
            try:
                collaborative, content = await asyncio.gather(*tasks)
            except BaseException:
                # One failed read aborts the request: stop the other scorer too.
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            return collaborative, content
        collaborative = await self._collaborative.score(reader_id, history)
        content = await self._content.score(history)
        return collaborative, content

    async def recommend_scored(
        self,
        reader_id: int,
        limit: int | None = None,
    ) -> list[RecommendationResult]:
        limit = self._default_limit if limit is None else limit
        _check_limit(limit)

        reader = await self._store.get_reader(reader_id)
        if not reader:
            logger.info("Recommendations requested for unknown reader %s", reader_id)
            return []

        history = await self._history.history(reader_id)
        if not history:
            logger.info(
                "Reader %s has no history, cold start in category %s",
                reader_id,
                reader.category_id,
            )
            return await self._cold_start.popular(reader.category_id, limit)

        collaborative, content = await self._score(reader_id, history)
        combined = fuse(collaborative, content, COLLABORATIVE_WEIGHT, CONTENT_WEIGHT)
        if not combined:
            logger.info("Reader %s: no collaborative or content signal", reader_id)
            return []

        top = rank(combined, limit)
        items = {item.item_id: item for item in await self._store.get_items([i for i, _ in top])}
        results = [
            RecommendationResult(
                item=items[item_id],
                score=score,
                reason=_reason(item_id, collaborative, content),
            )
            for item_id, score in top
            if item_id in items
        ]
        logger.info(
            "Reader %s: %d recommendations (history=%d, collaborative=%d, content=%d)",
            reader_id,
            len(results),
            len(history),
            len(collaborative),
            len(content),
        )
        return results

    async def similar(
        self,
        item_id: int,
        limit: int | None = None,
    ) -> list[Item]:
        limit = self._default_similar_limit if limit is None else limit
        _check_limit(limit)
        return await self._similarity.similar(item_id, limit)
