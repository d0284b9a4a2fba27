"""SQLAlchemy ORM models for the circulation tables read by the recommender."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class Student(Base):
    __tablename__ = "students"

    student_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    category = Column(Integer, nullable=True, index=True)
    approved = Column(Integer, nullable=False, default=0)
    rejected = Column(Integer, nullable=False, default=0)
    books_issued = Column(Integer, nullable=False, default=0)

    logs = relationship("IssueLog", back_populates="student")


class Book(Base):
    __tablename__ = "books"

    book_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(500), nullable=False)
    author = Column(String(300), nullable=False, index=True)
    category_id = Column(Integer, nullable=False, index=True)
    description = Column(Text, nullable=True)

    issues = relationship("Issue", back_populates="book")


class Issue(Base):
    """One loanable copy of a book."""

    __tablename__ = "book_issue"

    issue_id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(
        Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False, index=True
    )
    available_status = Column(Integer, nullable=False, default=1)

    book = relationship("Book", back_populates="issues")
    logs = relationship("IssueLog", back_populates="issue")


class IssueLog(Base):
    """One borrow/return event for a copy. return_time 0 means still out."""

    __tablename__ = "book_issue_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_issue_id = Column(
        Integer, ForeignKey("book_issue.issue_id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id = Column(
        Integer, ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False, index=True
    )
    issued_at = Column(Integer, nullable=False)
    return_time = Column(Integer, nullable=False, default=0)

    issue = relationship("Issue", back_populates="logs")
    student = relationship("Student", back_populates="logs")


class BookRating(Base):
    """Schema scaffolding only. Ratings are not a recommendation signal."""

    __tablename__ = "book_ratings"
    __table_args__ = (UniqueConstraint("student_id", "book_id", name="uq_book_ratings_student_book"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(
        Integer, ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False
    )
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=True)
    implicit_positive = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BookSimilarity(Base):
    """Schema scaffolding only. The engine computes similarity per request."""

    __tablename__ = "book_similarities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id_1 = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False)
    book_id_2 = Column(Integer, ForeignKey("books.book_id", ondelete="CASCADE"), nullable=False)
    similarity_score = Column(Numeric(5, 4), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
