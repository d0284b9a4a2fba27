"""In-memory store adapter built from plain record collections."""

import logging
from collections import defaultdict
from collections.abc import Collection, Iterable
from dataclasses import replace

from librec.domain.records import (
    Copy,
    Item,
    LoanEvent,
    Reader,
    available_copies,
    total_copies,
)
from librec.ports.stores import LibraryStore

logger = logging.getLogger(__name__)


class InMemoryLibraryStore(LibraryStore):
    """
    Serve every store contract from records held in memory.

    Intended for tests and small deployments. The collections are copied on
    construction; the store never changes them afterwards.
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        copies: Iterable[Copy] = (),
        readers: Iterable[Reader] = (),
        loans: Iterable[LoanEvent] = (),
    ) -> None:
        copies_by_item: dict[int, list[Copy]] = defaultdict(list)
        self._copy_to_item: dict[int, int] = {}
        for copy in copies:
            copies_by_item[copy.item_id].append(copy)
            self._copy_to_item[copy.copy_id] = copy.item_id

        self._items: dict[int, Item] = {}
        for item in items:
            held = copies_by_item.get(item.item_id, [])
            self._items[item.item_id] = replace(
                item,
                total_copies=total_copies(held),
                available_copies=available_copies(held),
            )

        self._readers: dict[int, Reader] = {r.reader_id: r for r in readers}
        self._loans: list[LoanEvent] = list(loans)
        logger.info(
            "InMemoryStore initialized: %d items, %d readers, %d loans",
            len(self._items),
            len(self._readers),
            len(self._loans),
        )

    def _loan_item(self, loan: LoanEvent) -> int | None:
        return self._copy_to_item.get(loan.copy_id)

    # ── CatalogStore ───────────────────────────────

    async def get_item(self, item_id: int) -> Item | None:
        return self._items.get(item_id)

    async def get_items(self, item_ids: Collection[int]) -> list[Item]:
        return [self._items[i] for i in set(item_ids) if i in self._items]

    async def find_related(
        self,
        category_ids: Collection[int],
        authors: Collection[str],
        exclude_ids: Collection[int],
        limit: int | None = None,
    ) -> list[Item]:
        categories = set(category_ids)
        author_set = set(authors)
        excluded = set(exclude_ids)
        matches = [
            item
            for item_id, item in sorted(self._items.items())
            if item_id not in excluded
            and (item.category_id in categories or item.author in author_set)
        ]
        return matches if limit is None else matches[:limit]

    async def popular_in_category(
        self, category_id: int, limit: int
    ) -> list[tuple[int, int]]:
        counts = {
            item_id: 0
            for item_id, item in self._items.items()
            if item.category_id == category_id
        }
        for loan in self._loans:
            item_id = self._loan_item(loan)
            if item_id in counts:
                counts[item_id] += 1
        ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked[:limit]

    # ── LoanStore ──────────────────────────────────

    async def borrowed_item_ids(self, reader_id: int) -> set[int]:
        items: set[int] = set()
        for loan in self._loans:
            if loan.reader_id != reader_id:
                continue
            item_id = self._loan_item(loan)
            if item_id is not None:
                items.add(item_id)
        return items

    async def find_neighbors(
        self,
        reader_id: int,
        seed_item_ids: Collection[int],
        min_overlap: int,
        limit: int,
    ) -> list[tuple[int, int]]:
        seeds = set(seed_item_ids)
        shared: dict[int, set[int]] = defaultdict(set)
        for loan in self._loans:
            if loan.reader_id == reader_id:
                continue
            item_id = self._loan_item(loan)
            if item_id in seeds:
                shared[loan.reader_id].add(item_id)
        overlaps = [
            (other, len(items))
            for other, items in shared.items()
            if len(items) >= min_overlap
        ]
        overlaps.sort(key=lambda kv: (-kv[1], kv[0]))
        return overlaps[:limit]

    async def item_borrower_counts(
        self,
        reader_ids: Collection[int],
        exclude_item_ids: Collection[int],
    ) -> dict[int, int]:
        readers = set(reader_ids)
        excluded = set(exclude_item_ids)
        borrowers: dict[int, set[int]] = defaultdict(set)
        for loan in self._loans:
            if loan.reader_id not in readers:
                continue
            item_id = self._loan_item(loan)
            if item_id is not None and item_id not in excluded:
                borrowers[item_id].add(loan.reader_id)
        return {item_id: len(who) for item_id, who in borrowers.items()}

    # ── ReaderStore ────────────────────────────────

    async def get_reader(self, reader_id: int) -> Reader | None:
        return self._readers.get(reader_id)
