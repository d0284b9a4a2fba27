"""Collaborative scoring from what overlapping readers borrowed."""

import logging

from librec.domain.records import Item, ScoreMap
from librec.domain.weights import MAX_NEIGHBORS, MIN_NEIGHBOR_OVERLAP
from librec.ports.stores import LoanStore

logger = logging.getLogger(__name__)


def normalize_frequencies(frequencies: dict[int, int]) -> ScoreMap:
    """Scale counts so the most frequent item scores 1.0."""
    if not frequencies:
        return {}
    top = max(frequencies.values())
    if top <= 0:
        return {}
    return {item_id: count / top for item_id, count in frequencies.items()}


class CollaborativeScorer:
    """
    Neighbors are other readers sharing at least MIN_NEIGHBOR_OVERLAP distinct
    history items, best MAX_NEIGHBORS by overlap. Candidates are the items
    those neighbors borrowed outside the history, scored by how many distinct
    neighbors borrowed each one relative to the most borrowed candidate.
    """

    def __init__(self, loans: LoanStore) -> None:
        self._loans = loans

    async def neighbors(self, reader_id: int, history: set[Item]) -> list[int]:
        rows = await self._loans.find_neighbors(
            reader_id,
            {item.item_id for item in history},
            min_overlap=MIN_NEIGHBOR_OVERLAP,
            limit=MAX_NEIGHBORS,
        )
        return [other for other, _ in rows]

    async def score(self, reader_id: int, history: set[Item]) -> ScoreMap:
        if not history:
            return {}
        neighbors = await self.neighbors(reader_id, history)
        if not neighbors:
            logger.debug("Reader %s has no neighbors", reader_id)
            return {}
        frequencies = await self._loans.item_borrower_counts(
            neighbors, exclude_item_ids={item.item_id for item in history}
        )
        logger.debug(
            "Collaborative scorer: %d neighbors, %d candidates",
            len(neighbors),
            len(frequencies),
        )
        return normalize_frequencies(frequencies)
