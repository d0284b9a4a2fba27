"""Content-based scoring from the category and author mix of a history."""

import logging
from collections import Counter
from collections.abc import Iterable

from librec.domain.records import Item, ScoreMap
from librec.domain.weights import AUTHOR_WEIGHT, CATEGORY_WEIGHT
from librec.ports.stores import CatalogStore

logger = logging.getLogger(__name__)


def content_scores(history: set[Item], candidates: Iterable[Item]) -> ScoreMap:
    """
    Score candidates against the history's category and author frequencies.

        score = CATEGORY_WEIGHT * catFreq / |history|
              + AUTHOR_WEIGHT * authorFreq / |history|

    History items and zero-score candidates are left out. ``history`` must be
    non-empty.
    """
    total = len(history)
    category_freq = Counter(item.category_id for item in history if item.category_id is not None)
    author_freq = Counter(item.author for item in history)
    seen = {item.item_id for item in history}

    scores: ScoreMap = {}
    for item in candidates:
        if item.item_id in seen:
            continue
        score = (
            CATEGORY_WEIGHT * (category_freq.get(item.category_id, 0) / total)
            + AUTHOR_WEIGHT * (author_freq.get(item.author, 0) / total)
        )
        if score > 0:
            scores[item.item_id] = score
    return scores


class ContentScorer:
    def __init__(self, catalog: CatalogStore) -> None:
        self._catalog = catalog

    async def score(self, history: set[Item]) -> ScoreMap:
        if not history:
            return {}
        categories = {item.category_id for item in history if item.category_id is not None}
        authors = {item.author for item in history}
        candidates = await self._catalog.find_related(
            categories, authors, exclude_ids={item.item_id for item in history}
        )
        scores = content_scores(history, candidates)
        logger.debug("Content scorer: %d candidates, %d scored", len(candidates), len(scores))
        return scores
