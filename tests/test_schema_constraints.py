from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from librarium.exceptions.errors import CheckViolation, NotNullViolation, UniqueViolation
from librarium.models import (
    Author,
    Book,
    BookCopy,
    Fine,
    FineReason,
    Loan,
    MemberCard,
    PaymentStatus,
)
from librarium.schemas.library import LoanCreate
from librarium.services.crud_service import create_entity, update_entity
from librarium.services.loan_service import checkout_copy


async def test_isbn_is_unique(db, make_book):
    await make_book(isbn="978-0000000001")

    with pytest.raises(UniqueViolation) as exc_info:
        await make_book(isbn="978-0000000001")

    assert exc_info.value.field == "isbn"


async def test_member_has_at_most_one_card(db, make_member):
    member = await make_member()
    await create_entity(
        db,
        MemberCard,
        {
            "member_id": member.member_id,
            "card_number": "C-1",
            "issue_date": date(2024, 1, 1),
            "expiry_date": date(2025, 1, 1),
        },
    )

    with pytest.raises(UniqueViolation) as exc_info:
        await create_entity(
            db,
            MemberCard,
            {
                "member_id": member.member_id,
                "card_number": "C-2",
                "issue_date": date(2024, 1, 1),
                "expiry_date": date(2025, 1, 1),
            },
        )

    assert exc_info.value.field == "member_id"


async def test_card_cannot_expire_before_issue(db, make_member):
    member = await make_member()

    with pytest.raises(CheckViolation) as exc_info:
        await create_entity(
            db,
            MemberCard,
            {
                "member_id": member.member_id,
                "card_number": "C-3",
                "issue_date": date(2024, 6, 1),
                "expiry_date": date(2024, 1, 1),
            },
        )

    assert exc_info.value.field == "expiry_after_issue"


async def test_author_death_year_not_before_birth_year(db):
    with pytest.raises(CheckViolation) as exc_info:
        await create_entity(
            db,
            Author,
            {"first_name": "Jane", "last_name": "Austen", "birth_year": 1817, "death_year": 1775},
        )

    assert exc_info.value.field == "death_year"

    author = await create_entity(
        db,
        Author,
        {"first_name": "Jane", "last_name": "Austen", "birth_year": 1775, "death_year": 1817},
    )
    assert author.author_id is not None


async def test_title_is_required(db):
    with pytest.raises(NotNullViolation) as exc_info:
        await create_entity(db, Book, {"isbn": "978-1111111111", "title": None})

    assert exc_info.value.field == "title"


async def test_copy_status_outside_enumeration_is_rejected(db, make_book):
    book = await make_book()

    with pytest.raises(CheckViolation) as exc_info:
        await create_entity(
            db,
            BookCopy,
            {"book_id": book.book_id, "barcode": "BC-X", "status": "Misplaced"},
        )

    assert exc_info.value.field == "status"


@pytest_asyncio.fixture
async def open_loan(db, make_member, make_copy, jan):
    member = await make_member()
    copy = await make_copy()
    return await checkout_copy(
        db,
        LoanCreate(
            copy_id=copy.copy_id,
            member_id=member.member_id,
            checkout_date=jan(1),
            due_date=jan(15),
        ),
    )


async def test_fine_amount_must_be_positive(db, open_loan):
    with pytest.raises(CheckViolation) as exc_info:
        await create_entity(
            db,
            Fine,
            {"loan_id": open_loan.loan_id, "amount": Decimal("0"), "reason": FineReason.DAMAGED_ITEM},
        )

    assert exc_info.value.field == "amount"


async def test_paid_fine_requires_paid_date(db, open_loan):
    with pytest.raises(CheckViolation) as exc_info:
        await create_entity(
            db,
            Fine,
            {
                "loan_id": open_loan.loan_id,
                "amount": Decimal("3.00"),
                "reason": FineReason.DAMAGED_ITEM,
                "payment_status": PaymentStatus.PAID,
            },
        )

    assert exc_info.value.field == "paid_date"


async def test_renewal_count_is_capped_by_the_schema(db, open_loan):
    with pytest.raises(CheckViolation) as exc_info:
        await update_entity(db, open_loan, {"renewed_times": 4})

    assert exc_info.value.field == "renewed_times"


async def test_due_date_cannot_precede_checkout(db, make_member, make_copy, jan):
    member = await make_member()
    copy = await make_copy()

    with pytest.raises(CheckViolation) as exc_info:
        await create_entity(
            db,
            Loan,
            {
                "copy_id": copy.copy_id,
                "member_id": member.member_id,
                "checkout_date": jan(10),
                "due_date": jan(5),
            },
        )

    assert exc_info.value.field == "due_date"


async def test_second_open_loan_on_a_copy_is_rejected_by_the_index(db, open_loan, make_member, jan):
    other = await make_member()

    with pytest.raises(UniqueViolation) as exc_info:
        await create_entity(
            db,
            Loan,
            {
                "copy_id": open_loan.copy_id,
                "member_id": other.member_id,
                "checkout_date": jan(2),
                "due_date": jan(16),
            },
        )

    assert exc_info.value.field == "copy_id"


async def test_returned_loans_do_not_block_a_new_loan(db, open_loan, make_member, jan):
    await update_entity(db, open_loan, {"return_date": jan(5)})
    other = await make_member()

    loan = await create_entity(
        db,
        Loan,
        {
            "copy_id": open_loan.copy_id,
            "member_id": other.member_id,
            "checkout_date": jan(6),
            "due_date": jan(20),
        },
    )

    assert loan.loan_id != open_loan.loan_id
