"""SQLAlchemy store adapter over the circulation schema."""

import logging
from collections.abc import Collection

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from librec.domain.models import Book, Issue, IssueLog, Student
from librec.domain.records import Item, Reader
from librec.ports.stores import LibraryStore

logger = logging.getLogger(__name__)


def _copy_counts():
    """Per-book copy totals as a subquery (books without copies are absent)."""
    return (
        select(
            Issue.book_id.label("book_id"),
            func.count(Issue.issue_id).label("total"),
            func.sum(case((Issue.available_status == 1, 1), else_=0)).label("available"),
        )
        .group_by(Issue.book_id)
        .subquery()
    )


def _item_query() -> Select:
    counts = _copy_counts()
    return select(Book, counts.c.total, counts.c.available).outerjoin(
        counts, counts.c.book_id == Book.book_id
    )


def _to_item(book: Book, total: int | None, available: int | None) -> Item:
    return Item(
        item_id=book.book_id,
        title=book.title,
        author=book.author,
        category_id=book.category_id,
        description=book.description,
        total_copies=int(total or 0),
        available_copies=int(available or 0),
    )


class SqlLibraryStore(LibraryStore):
    """
    Serve every store contract with read-only SQL.

    Each method opens its own short-lived session so independent queries can
    be awaited concurrently. Database errors propagate to the caller.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _items(self, stmt: Select) -> list[Item]:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_to_item(book, total, available) for book, total, available in result.all()]

    # ── CatalogStore ───────────────────────────────

    async def get_item(self, item_id: int) -> Item | None:
        items = await self._items(_item_query().where(Book.book_id == item_id))
        return items[0] if items else None

    async def get_items(self, item_ids: Collection[int]) -> list[Item]:
        if not item_ids:
            return []
        return await self._items(_item_query().where(Book.book_id.in_(list(item_ids))))

    async def find_related(
        self,
        category_ids: Collection[int],
        authors: Collection[str],
        exclude_ids: Collection[int],
        limit: int | None = None,
    ) -> list[Item]:
        if not category_ids and not authors:
            return []
        stmt = _item_query().where(
            or_(
                Book.category_id.in_(list(category_ids)),
                Book.author.in_(list(authors)),
            )
        )
        if exclude_ids:
            stmt = stmt.where(Book.book_id.not_in(list(exclude_ids)))
        stmt = stmt.order_by(Book.book_id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._items(stmt)

    async def popular_in_category(
        self, category_id: int, limit: int
    ) -> list[tuple[int, int]]:
        borrow_count = func.count(IssueLog.id).label("borrow_count")
        stmt = (
            select(Book.book_id, borrow_count)
            .outerjoin(Issue, Issue.book_id == Book.book_id)
            .outerjoin(IssueLog, IssueLog.book_issue_id == Issue.issue_id)
            .where(Book.category_id == category_id)
            .group_by(Book.book_id)
            .order_by(borrow_count.desc(), Book.book_id)
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [(book_id, count) for book_id, count in result.all()]

    # ── LoanStore ──────────────────────────────────

    async def borrowed_item_ids(self, reader_id: int) -> set[int]:
        stmt = (
            select(Issue.book_id)
            .join(IssueLog, IssueLog.book_issue_id == Issue.issue_id)
            .where(IssueLog.student_id == reader_id)
            .distinct()
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return set(result.scalars().all())

    async def find_neighbors(
        self,
        reader_id: int,
        seed_item_ids: Collection[int],
        min_overlap: int,
        limit: int,
    ) -> list[tuple[int, int]]:
        if not seed_item_ids:
            return []
        overlap = func.count(func.distinct(Issue.book_id)).label("overlap")
        stmt = (
            select(IssueLog.student_id, overlap)
            .join(Issue, IssueLog.book_issue_id == Issue.issue_id)
            .where(
                Issue.book_id.in_(list(seed_item_ids)),
                IssueLog.student_id != reader_id,
            )
            .group_by(IssueLog.student_id)
            .having(overlap >= min_overlap)
            .order_by(overlap.desc(), IssueLog.student_id)
            .limit(limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [(student_id, count) for student_id, count in result.all()]

    async def item_borrower_counts(
        self,
        reader_ids: Collection[int],
        exclude_item_ids: Collection[int],
    ) -> dict[int, int]:
        if not reader_ids:
            return {}
        frequency = func.count(func.distinct(IssueLog.student_id)).label("frequency")
        stmt = (
            select(Issue.book_id, frequency)
            .join(IssueLog, IssueLog.book_issue_id == Issue.issue_id)
            .where(IssueLog.student_id.in_(list(reader_ids)))
            .group_by(Issue.book_id)
        )
        if exclude_item_ids:
            stmt = stmt.where(Issue.book_id.not_in(list(exclude_item_ids)))
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return {book_id: count for book_id, count in result.all()}

    # ── ReaderStore ────────────────────────────────

    async def get_reader(self, reader_id: int) -> Reader | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Student).where(Student.student_id == reader_id)
            )
            student = result.scalar_one_or_none()
        if not student:
            return None
        return Reader(
            reader_id=student.student_id,
            category_id=student.category,
            approved=student.approved == 1,
            rejected=student.rejected == 1,
        )
