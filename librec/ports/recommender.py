"""Recommender port: abstract interface for the recommendation engine."""

from abc import ABC, abstractmethod

from librec.domain.records import Item, RecommendationResult


class RecommenderPort(ABC):
    """Abstraction for the book recommendation engine."""

    @abstractmethod
    async def recommend_scored(
        self,
        reader_id: int,
        limit: int | None = None,
    ) -> list[RecommendationResult]:
        """Return ranked book recommendations for a reader, with scores."""
        ...

    async def recommend(
        self,
        reader_id: int,
        limit: int | None = None,
    ) -> list[Item]:
        """Return ranked book recommendations for a reader."""
        results = await self.recommend_scored(reader_id, limit)
        return [r.item for r in results]

    @abstractmethod
    async def similar(
        self,
        item_id: int,
        limit: int | None = None,
    ) -> list[Item]:
        """Return books most like ``item_id``, excluding it."""
        ...
