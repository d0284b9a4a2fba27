"""Store ports: the read contracts the recommender needs from the data layer."""

from abc import ABC, abstractmethod
from collections.abc import Collection

from librec.domain.records import Item, Reader


class CatalogStore(ABC):
    """Read access to books and their borrow statistics."""

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None:
        """Return one item, or None if it does not exist."""
        ...

    @abstractmethod
    async def get_items(self, item_ids: Collection[int]) -> list[Item]:
        """Return the existing items among ``item_ids``. Order is unspecified."""
        ...

    @abstractmethod
    async def find_related(
        self,
        category_ids: Collection[int],
        authors: Collection[str],
        exclude_ids: Collection[int],
        limit: int | None = None,
    ) -> list[Item]:
        """
        Items whose category is in ``category_ids`` OR whose author is in
        ``authors``, minus ``exclude_ids``. Ordered by item id, optionally
        truncated to ``limit``.
        """
        ...

    @abstractmethod
    async def popular_in_category(
        self, category_id: int, limit: int
    ) -> list[tuple[int, int]]:
        """
        ``(item_id, borrow_count)`` for items in a category, where borrow_count
        is the number of loan events across all copies of the item. Highest
        count first, ties by item id ascending. Zero-count items are included.
        """
        ...


class LoanStore(ABC):
    """Read access to borrowing history."""

    @abstractmethod
    async def borrowed_item_ids(self, reader_id: int) -> set[int]:
        """Distinct item ids the reader has ever borrowed, returned or not."""
        ...

    @abstractmethod
    async def find_neighbors(
        self,
        reader_id: int,
        seed_item_ids: Collection[int],
        min_overlap: int,
        limit: int,
    ) -> list[tuple[int, int]]:
        """
        ``(other_reader_id, overlap)`` for readers other than ``reader_id``
        who borrowed at least ``min_overlap`` distinct seed items. Highest
        overlap first, ties by reader id ascending, at most ``limit`` rows.
        """
        ...

    @abstractmethod
    async def item_borrower_counts(
        self,
        reader_ids: Collection[int],
        exclude_item_ids: Collection[int],
    ) -> dict[int, int]:
        """Item id -> number of distinct ``reader_ids`` who borrowed it."""
        ...


class ReaderStore(ABC):
    @abstractmethod
    async def get_reader(self, reader_id: int) -> Reader | None:
        """Return one reader, or None if unknown."""
        ...


class LibraryStore(CatalogStore, LoanStore, ReaderStore):
    """Convenience union for adapters that serve every contract."""
