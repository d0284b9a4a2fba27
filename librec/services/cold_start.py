"""Popularity fallback for readers with no borrowing history."""

import logging

from librec.domain.records import RecommendationResult
from librec.ports.stores import CatalogStore

logger = logging.getLogger(__name__)

REASON_POPULAR = "popular_in_category"


class ColdStartFallback:
    def __init__(self, catalog: CatalogStore) -> None:
        self._catalog = catalog

    async def popular(
        self, category_id: int | None, limit: int
    ) -> list[RecommendationResult]:
        """
        Most borrowed items in the reader's category, borrow count descending
        then item id ascending. A reader without a category matches nothing.
        """
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        if category_id is None:
            logger.info("Cold start without a reader category: no results")
            return []

        ranked = await self._catalog.popular_in_category(category_id, limit)
        items = {item.item_id: item for item in await self._catalog.get_items([i for i, _ in ranked])}
        return [
            RecommendationResult(item=items[item_id], score=float(count), reason=REASON_POPULAR)
            for item_id, count in ranked
            if item_id in items
        ]
