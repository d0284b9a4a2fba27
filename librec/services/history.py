"""History reader: the distinct books a reader has ever borrowed."""

import logging

from librec.domain.records import Item
from librec.ports.stores import CatalogStore, LoanStore

logger = logging.getLogger(__name__)


class HistoryReader:
    def __init__(self, loans: LoanStore, catalog: CatalogStore) -> None:
        self._loans = loans
        self._catalog = catalog

    async def history(self, reader_id: int) -> set[Item]:
        """Every item with at least one loan by the reader, active or returned."""
        item_ids = await self._loans.borrowed_item_ids(reader_id)
        if not item_ids:
            return set()
        items = set(await self._catalog.get_items(item_ids))
        logger.debug("Reader %s history: %d items", reader_id, len(items))
        return items
