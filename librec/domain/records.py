"""
Immutable value records handed across the store boundary.

Records never talk to a store. Anything the ORM layer exposed as a computed
accessor (available copies, loan state, reader status) is a plain function or
property over data the caller already holds.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

SECONDS_PER_DAY = 86400
DEFAULT_DUE_DAYS = 14

# item_id -> relevance score for one scoring pass
ScoreMap = dict[int, float]


@dataclass(frozen=True)
class Copy:
    """One loanable copy (``book_issue`` row)."""

    copy_id: int
    item_id: int
    available: bool = True


@dataclass(frozen=True)
class Item:
    """A catalog book with copy counts captured at read time."""

    item_id: int
    title: str
    author: str
    category_id: int | None
    description: str | None = None
    total_copies: int = 0
    available_copies: int = 0

    @property
    def is_available(self) -> bool:
        return self.available_copies > 0


@dataclass(frozen=True)
class Reader:
    reader_id: int
    category_id: int | None = None
    approved: bool = False
    rejected: bool = False

    @property
    def status(self) -> str:
        if self.approved:
            return "approved"
        if self.rejected:
            return "rejected"
        return "pending"


@dataclass(frozen=True)
class LoanEvent:
    """A borrow of one copy by one reader. ``returned_at`` 0 means still out."""

    loan_id: int
    copy_id: int
    reader_id: int
    issued_at: int
    returned_at: int = 0

    @property
    def is_active(self) -> bool:
        return self.returned_at == 0

    @property
    def is_returned(self) -> bool:
        return self.returned_at > 0


@dataclass(frozen=True)
class RecommendationResult:
    """A single recommendation with score and explanation."""

    item: Item
    score: float
    reason: str


# ── Copy helpers ──────────────────────────────────


def total_copies(copies: Iterable[Copy]) -> int:
    return sum(1 for _ in copies)


def available_copies(copies: Iterable[Copy]) -> int:
    return sum(1 for c in copies if c.available)


def is_available(copies: Iterable[Copy]) -> bool:
    return available_copies(copies) > 0


# ── Loan helpers ──────────────────────────────────


def days_issued(loan: LoanEvent, now: int) -> int:
    """Whole days the copy has been (or was) out, rounded up."""
    end = now if loan.is_active else loan.returned_at
    return math.ceil((end - loan.issued_at) / SECONDS_PER_DAY)


def is_overdue(loan: LoanEvent, now: int, due_days: int = DEFAULT_DUE_DAYS) -> bool:
    """Only active loans can be overdue."""
    if not loan.is_active:
        return False
    return days_issued(loan, now) > due_days
