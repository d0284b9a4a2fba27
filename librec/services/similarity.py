"""Item-to-item similarity by shared category and author."""

import logging

from librec.domain.records import Item
from librec.domain.weights import AUTHOR_WEIGHT, CATEGORY_WEIGHT, SIMILAR_POOL_FACTOR
from librec.ports.stores import CatalogStore

logger = logging.getLogger(__name__)


def similarity_score(target: Item, candidate: Item) -> float:
    score = 0.0
    if target.category_id is not None and candidate.category_id == target.category_id:
        score += CATEGORY_WEIGHT
    if candidate.author == target.author:
        score += AUTHOR_WEIGHT
    return score


class ItemSimilarityEngine:
    """
    Ranks books sharing the target's category or author.

    The candidate pool is cut to SIMILAR_POOL_FACTOR * limit before scoring,
    so a better match outside the pool can be missed. That approximation is
    accepted to keep the read bounded.
    """

    def __init__(self, catalog: CatalogStore) -> None:
        self._catalog = catalog

    async def similar(self, item_id: int, limit: int) -> list[Item]:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        target = await self._catalog.get_item(item_id)
        if not target:
            logger.info("Similar items requested for unknown item %s", item_id)
            return []

        categories = [target.category_id] if target.category_id is not None else []
        pool = await self._catalog.find_related(
            categories,
            [target.author],
            exclude_ids=[item_id],
            limit=limit * SIMILAR_POOL_FACTOR,
        )
        scored = [(similarity_score(target, candidate), candidate) for candidate in pool]
        scored.sort(key=lambda pair: (-pair[0], pair[1].item_id))
        return [candidate for _, candidate in scored[:limit]]
