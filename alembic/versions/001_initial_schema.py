"""Initial circulation schema.

Revision ID: 001
Revises:
Create Date: 2025-01-10 00:00:00.000000
"""

import sqlalchemy as sa

from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Students
    op.create_table(
        "students",
        sa.Column("student_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("category", sa.Integer, nullable=True),
        sa.Column("approved", sa.Integer, nullable=False, server_default="0"),
        sa.Column("rejected", sa.Integer, nullable=False, server_default="0"),
        sa.Column("books_issued", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_students_category", "students", ["category"])

    # Books
    op.create_table(
        "books",
        sa.Column("book_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(300), nullable=False),
        sa.Column("category_id", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
    )
    op.create_index("ix_books_author", "books", ["author"])
    op.create_index("ix_books_category_id", "books", ["category_id"])

    # Copies
    op.create_table(
        "book_issue",
        sa.Column("issue_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "book_id",
            sa.Integer,
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("available_status", sa.Integer, nullable=False, server_default="1"),
    )
    op.create_index("ix_book_issue_book_id", "book_issue", ["book_id"])

    # Loan events (return_time 0 = still out)
    op.create_table(
        "book_issue_log",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "book_issue_id",
            sa.Integer,
            sa.ForeignKey("book_issue.issue_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.student_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("issued_at", sa.Integer, nullable=False),
        sa.Column("return_time", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_book_issue_log_book_issue_id", "book_issue_log", ["book_issue_id"])
    op.create_index("ix_book_issue_log_student_id", "book_issue_log", ["student_id"])

    # Ratings scaffold (not read by the recommender)
    op.create_table(
        "book_ratings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("students.student_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "book_id",
            sa.Integer,
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("implicit_positive", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "book_id", name="uq_book_ratings_student_book"),
    )

    # Similarity scaffold (not maintained by the recommender)
    op.create_table(
        "book_similarities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "book_id_1",
            sa.Integer,
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "book_id_2",
            sa.Integer,
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("similarity_score", sa.Numeric(5, 4), nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_book_similarities_book_score",
        "book_similarities",
        ["book_id_1", "similarity_score"],
    )


def downgrade() -> None:
    op.drop_index("ix_book_similarities_book_score", table_name="book_similarities")
    op.drop_table("book_similarities")
    op.drop_table("book_ratings")
    op.drop_table("book_issue_log")
    op.drop_table("book_issue")
    op.drop_table("books")
    op.drop_table("students")
