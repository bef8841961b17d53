"""Initial task-management and library schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op
from librarium.models.book import AuthorRole
from librarium.models.book_copy import CopyStatus
from librarium.models.fine import FineReason, PaymentStatus
from librarium.models.member import MembershipStatus
from librarium.models.project import ProjectStatus
from librarium.models.reservation import ReservationStatus
from librarium.models.staff import StaffRole
from librarium.models.task import TaskPriority, TaskStatus
from librarium.models.types import enum_column
from librarium.models.user import UserRole

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OPEN_LOAN = sa.text("return_date IS NULL")


def upgrade():
    # Task management
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50)),
        sa.Column("last_name", sa.String(50)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("role", enum_column(UserRole, "role"), nullable=False),
        sa.UniqueConstraint("username", name=op.f("uq_users_username")),
        sa.UniqueConstraint("email", name=op.f("uq_users_email")),
    )
    op.create_table(
        "projects",
        sa.Column("project_id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "owner_id",
            sa.Integer(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deadline", sa.Date()),
        sa.Column("status", enum_column(ProjectStatus, "status"), nullable=False),
    )
    op.create_table(
        "tasks",
        sa.Column("task_id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "project_id",
            sa.Integer(),
            sa.ForeignKey("projects.project_id", ondelete="SET NULL"),
        ),
        sa.Column(
            "assigned_to",
            sa.Integer(),
            sa.ForeignKey("users.user_id", ondelete="SET NULL"),
        ),
        sa.Column(
            "created_by",
            sa.Integer(),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("due_date", sa.Date()),
        sa.Column("priority", enum_column(TaskPriority, "priority"), nullable=False),
        sa.Column("status", enum_column(TaskStatus, "status"), nullable=False),
    )
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])

    # Library: reference entities
    op.create_table(
        "members",
        sa.Column("member_id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("address", sa.String(255)),
        sa.Column("membership_date", sa.Date(), nullable=False),
        sa.Column(
            "membership_status",
            enum_column(MembershipStatus, "membership_status"),
            nullable=False,
        ),
        sa.Column("membership_expiry", sa.Date()),
        sa.UniqueConstraint("email", name=op.f("uq_members_email")),
    )
    op.create_table(
        "member_cards",
        sa.Column("card_id", sa.Integer(), primary_key=True),
        sa.Column(
            "member_id",
            sa.Integer(),
            sa.ForeignKey("members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("card_number", sa.String(20), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.UniqueConstraint("member_id", name=op.f("uq_member_cards_member_id")),
        sa.UniqueConstraint("card_number", name=op.f("uq_member_cards_card_number")),
        sa.CheckConstraint(
            "expiry_date >= issue_date",
            name=op.f("ck_member_cards_expiry_after_issue"),
        ),
    )
    op.create_table(
        "authors",
        sa.Column("author_id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("birth_year", sa.Integer()),
        sa.Column("death_year", sa.Integer()),
        sa.Column("nationality", sa.String(50)),
        sa.Column("biography", sa.Text()),
        sa.CheckConstraint(
            "death_year IS NULL OR birth_year IS NULL OR death_year >= birth_year",
            name=op.f("ck_authors_death_year"),
        ),
    )
    op.create_index("ix_authors_last_name", "authors", ["last_name"])
    op.create_table(
        "publishers",
        sa.Column("publisher_id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("address", sa.String(255)),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(100)),
        sa.Column("website", sa.String(255)),
        sa.Column("established_year", sa.Integer()),
        sa.UniqueConstraint("name", name=op.f("uq_publishers_name")),
    )
    op.create_table(
        "categories",
        sa.Column("category_id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "parent_category_id",
            sa.Integer(),
            sa.ForeignKey("categories.category_id", ondelete="SET NULL"),
        ),
        sa.UniqueConstraint("name", name=op.f("uq_categories_name")),
    )
    op.create_table(
        "staff",
        sa.Column("staff_id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("role", enum_column(StaffRole, "role"), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column(
            "supervisor_id",
            sa.Integer(),
            sa.ForeignKey("staff.staff_id", ondelete="SET NULL"),
        ),
        sa.UniqueConstraint("email", name=op.f("uq_staff_email")),
    )

    # Library: catalog and inventory
    op.create_table(
        "books",
        sa.Column("book_id", sa.Integer(), primary_key=True),
        sa.Column("isbn", sa.String(20), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column(
            "publisher_id",
            sa.Integer(),
            sa.ForeignKey("publishers.publisher_id", ondelete="SET NULL"),
        ),
        sa.Column("publication_year", sa.Integer()),
        sa.Column("edition", sa.String(20)),
        sa.Column("pages", sa.Integer()),
        sa.Column("language", sa.String(30)),
        sa.Column("description", sa.Text()),
        sa.Column("added_date", sa.Date(), nullable=False),
        sa.UniqueConstraint("isbn", name=op.f("uq_books_isbn")),
    )
    op.create_index("ix_books_title", "books", ["title"])
    op.create_table(
        "book_authors",
        sa.Column(
            "book_id",
            sa.Integer(),
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "author_id",
            sa.Integer(),
            sa.ForeignKey("authors.author_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("role", enum_column(AuthorRole, "role"), nullable=False),
    )
    op.create_table(
        "book_categories",
        sa.Column(
            "book_id",
            sa.Integer(),
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("categories.category_id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_table(
        "book_copies",
        sa.Column("copy_id", sa.Integer(), primary_key=True),
        sa.Column(
            "book_id",
            sa.Integer(),
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("barcode", sa.String(50), nullable=False),
        sa.Column("acquisition_date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column("status", enum_column(CopyStatus, "status"), nullable=False),
        sa.Column("location", sa.String(50)),
        sa.UniqueConstraint("barcode", name=op.f("uq_book_copies_barcode")),
    )
    op.create_index("ix_book_copies_book_id", "book_copies", ["book_id"])

    # Library: transactions
    op.create_table(
        "loans",
        sa.Column("loan_id", sa.Integer(), primary_key=True),
        sa.Column(
            "copy_id",
            sa.Integer(),
            sa.ForeignKey("book_copies.copy_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "member_id",
            sa.Integer(),
            sa.ForeignKey("members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "staff_id",
            sa.Integer(),
            sa.ForeignKey("staff.staff_id", ondelete="SET NULL"),
        ),
        sa.Column("checkout_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("return_date", sa.Date()),
        sa.Column("renewed_times", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("due_date >= checkout_date", name=op.f("ck_loans_due_date")),
        sa.CheckConstraint(
            "return_date IS NULL OR return_date >= checkout_date",
            name=op.f("ck_loans_return_date"),
        ),
        sa.CheckConstraint(
            "renewed_times >= 0 AND renewed_times <= 3",
            name=op.f("ck_loans_renewed_times"),
        ),
    )
    op.create_index("ix_loans_member_id", "loans", ["member_id"])
    op.create_index(
        "uq_loans_open_copy",
        "loans",
        ["copy_id"],
        unique=True,
        postgresql_where=OPEN_LOAN,
        sqlite_where=OPEN_LOAN,
    )
    op.create_table(
        "reservations",
        sa.Column("reservation_id", sa.Integer(), primary_key=True),
        sa.Column(
            "book_id",
            sa.Integer(),
            sa.ForeignKey("books.book_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "member_id",
            sa.Integer(),
            sa.ForeignKey("members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "copy_id",
            sa.Integer(),
            sa.ForeignKey("book_copies.copy_id", ondelete="SET NULL"),
        ),
        sa.Column("reservation_date", sa.Date(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column("status", enum_column(ReservationStatus, "status"), nullable=False),
        sa.CheckConstraint(
            "expiry_date >= reservation_date",
            name=op.f("ck_reservations_expiry_date"),
        ),
    )
    op.create_index("ix_reservations_member_id", "reservations", ["member_id"])
    op.create_table(
        "fines",
        sa.Column("fine_id", sa.Integer(), primary_key=True),
        sa.Column(
            "loan_id",
            sa.Integer(),
            sa.ForeignKey("loans.loan_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("reason", enum_column(FineReason, "reason"), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column(
            "payment_status",
            enum_column(PaymentStatus, "payment_status"),
            nullable=False,
        ),
        sa.Column("paid_date", sa.Date()),
        sa.CheckConstraint("amount > 0", name=op.f("ck_fines_amount")),
        sa.CheckConstraint(
            "(payment_status = 'Paid' AND paid_date IS NOT NULL) "
            "OR (payment_status <> 'Paid' AND paid_date IS NULL)",
            name=op.f("ck_fines_paid_date"),
        ),
    )
    op.create_index("ix_fines_loan_id", "fines", ["loan_id"])


def downgrade():
    for table in (
        "fines",
        "reservations",
        "loans",
        "book_copies",
        "book_categories",
        "book_authors",
        "books",
        "staff",
        "categories",
        "publishers",
        "authors",
        "member_cards",
        "members",
        "tasks",
        "projects",
        "users",
    ):
        op.drop_table(table)
