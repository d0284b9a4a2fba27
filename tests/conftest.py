from dataclasses import dataclass, field

import pytest

from librec.adapters.store.memory import InMemoryLibraryStore
from librec.adapters.store.sql import SqlLibraryStore
from librec.database import create_engine, create_session_factory
from librec.domain.models import Base, Book, Issue, IssueLog, Student
from librec.domain.records import Copy, Item, LoanEvent, Reader

BASE_TIME = 1_700_000_000
DAY = 86400


def book(item_id: int, category_id: int, author: str) -> Item:
    return Item(item_id=item_id, title=f"Book {item_id}", author=author, category_id=category_id)


def copy_id_for(item_id: int) -> int:
    return item_id * 10


@dataclass
class Library:
    """
    Test catalog. Every item gets one copy; ``borrows`` is a list of
    ``(reader_id, item_id)`` or ``(reader_id, item_id, active)``.
    """

    items: list[Item]
    readers: list[Reader]
    borrows: list[tuple] = field(default_factory=list)
    extra_copies: list[Copy] = field(default_factory=list)

    @property
    def copies(self) -> list[Copy]:
        return [Copy(copy_id=copy_id_for(i.item_id), item_id=i.item_id) for i in self.items] + list(
            self.extra_copies
        )

    @property
    def loans(self) -> list[LoanEvent]:
        loans = []
        for n, borrow in enumerate(self.borrows, start=1):
            reader_id, item_id = borrow[0], borrow[1]
            active = borrow[2] if len(borrow) > 2 else False
            issued = BASE_TIME + n * DAY
            loans.append(
                LoanEvent(
                    loan_id=n,
                    copy_id=copy_id_for(item_id),
                    reader_id=reader_id,
                    issued_at=issued,
                    returned_at=0 if active else issued + DAY,
                )
            )
        return loans


async def _seed(session, library: Library) -> None:
    session.add_all(
        Student(
            student_id=r.reader_id,
            first_name="Reader",
            last_name=str(r.reader_id),
            category=r.category_id,
            approved=int(r.approved),
            rejected=int(r.rejected),
        )
        for r in library.readers
    )
    session.add_all(
        Book(
            book_id=i.item_id,
            title=i.title,
            author=i.author,
            category_id=i.category_id,
            description=i.description,
        )
        for i in library.items
    )
    await session.flush()
    session.add_all(
        Issue(issue_id=c.copy_id, book_id=c.item_id, available_status=int(c.available))
        for c in library.copies
    )
    await session.flush()
    session.add_all(
        IssueLog(
            id=loan.loan_id,
            book_issue_id=loan.copy_id,
            student_id=loan.reader_id,
            issued_at=loan.issued_at,
            return_time=loan.returned_at,
        )
        for loan in library.loans
    )
    await session.commit()


@pytest.fixture(params=["memory", "sql"])
async def make_store(request, tmp_path):
    """Build the same library on the in-memory and the SQLite-backed store."""
    engines = []

    async def _make(library: Library):
        if request.param == "memory":
            return InMemoryLibraryStore(
                library.items, library.copies, library.readers, library.loans
            )
        engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / f'library_{len(engines)}.db'}")
        engines.append(engine)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = create_session_factory(engine)
        async with factory() as session:
            await _seed(session, library)
        return SqlLibraryStore(factory)

    yield _make
    for engine in engines:
        await engine.dispose()


# ── Shared catalogs ────────────────────────────────


@pytest.fixture
def content_library() -> Library:
    """Reader 1 has read A and B; C shares A's author and category, D shares nothing."""
    return Library(
        items=[book(1, 1, "X"), book(2, 1, "Y"), book(3, 1, "X"), book(4, 2, "Z")],
        readers=[Reader(1, category_id=1, approved=True)],
        borrows=[(1, 1), (1, 2)],
    )


@pytest.fixture
def hybrid_library() -> Library:
    """
    Reader 1: history {1, 2, 3}. Readers 3 (overlap 3) and 2 (overlap 2) are
    neighbors; reader 4 borrowed item 1 twice, which is still overlap 1.
    Reader 5 has no history. Reader 6 only read item 7, which nothing else
    resembles.
    """
    return Library(
        items=[
            book(1, 1, "A"),
            book(2, 1, "B"),
            book(3, 2, "C"),
            book(4, 1, "D"),
            book(5, 2, "A"),
            book(6, 3, "E"),
            book(7, 9, "Q"),
        ],
        readers=[Reader(r, category_id=1, approved=True) for r in range(1, 7)],
        borrows=[
            (1, 1),
            (1, 2),
            (1, 3, True),
            (2, 1),
            (2, 2),
            (2, 4),
            (2, 6),
            (3, 1),
            (3, 2),
            (3, 3),
            (3, 4),
            (4, 1),
            (4, 1),
            (4, 5),
            (6, 7),
        ],
    )


@pytest.fixture
def similarity_library() -> Library:
    return Library(
        items=[
            book(1, 3, "X"),
            book(2, 3, "X"),
            book(3, 3, "Z"),
            book(4, 5, "X"),
            book(5, 6, "W"),
        ],
        readers=[],
    )
