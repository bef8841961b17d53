from decimal import Decimal

import pytest

from librarium.exceptions.errors import (
    CheckViolation,
    InvalidStateTransition,
    NotFound,
    UniqueViolation,
)
from librarium.models import BookCopy, CopyStatus, FineReason, MembershipStatus, PaymentStatus
from librarium.schemas.library import LoanCreate, LoanReturn
from librarium.services.fine_service import list_member_fines
from librarium.services.loan_service import (
    checkout_copy,
    list_loans,
    list_overdue_loans,
    renew_loan,
    return_copy,
)


async def checkout(db, copy, member, checkout_date, due_date=None):
    return await checkout_copy(
        db,
        LoanCreate(
            copy_id=copy.copy_id,
            member_id=member.member_id,
            checkout_date=checkout_date,
            due_date=due_date,
        ),
    )


async def test_checkout_marks_copy_on_loan(db, make_member, make_copy, jan):
    member = await make_member()
    copy = await make_copy()

    loan = await checkout(db, copy, member, jan(1))

    assert loan.due_date == jan(15)
    assert loan.renewed_times == 0
    assert loan.return_date is None
    copy = await db.get(BookCopy, copy.copy_id)
    assert copy.status == CopyStatus.ON_LOAN


async def test_copy_cannot_be_lent_twice(db, make_member, make_copy, jan):
    copy = await make_copy()
    await checkout(db, copy, await make_member(), jan(1))

    with pytest.raises(UniqueViolation) as exc_info:
        await checkout(db, copy, await make_member(), jan(2))

    assert exc_info.value.field == "copy_id"
    assert exc_info.value.constraint == "uq_loans_open_copy"


@pytest.mark.parametrize("status", [CopyStatus.LOST, CopyStatus.UNDER_REPAIR, CopyStatus.RESERVED])
async def test_unavailable_copy_cannot_be_lent(db, make_member, make_copy, jan, status):
    copy = await make_copy(status=status)

    with pytest.raises(InvalidStateTransition) as exc_info:
        await checkout(db, copy, await make_member(), jan(1))

    assert exc_info.value.current == status.value


async def test_suspended_member_cannot_borrow(db, make_member, make_copy, jan):
    member = await make_member(membership_status=MembershipStatus.SUSPENDED)
    copy = await make_copy()
    copy_id = copy.copy_id

    with pytest.raises(InvalidStateTransition):
        await checkout(db, copy, member, jan(1))

    copy = await db.get(BookCopy, copy_id)
    assert copy.status == CopyStatus.AVAILABLE


async def test_checkout_of_missing_copy_is_not_found(db, make_member, jan):
    member = await make_member()

    with pytest.raises(NotFound) as exc_info:
        await checkout_copy(db, LoanCreate(copy_id=999, member_id=member.member_id))

    assert exc_info.value.entity == "BookCopy"


async def test_renewal_extends_due_date_up_to_the_limit(db, make_member, make_copy, jan):
    loan = await checkout(db, await make_copy(), await make_member(), jan(1), jan(15))

    for expected in (1, 2, 3):
        loan = await renew_loan(db, loan.loan_id)
        assert loan.renewed_times == expected

    assert (loan.due_date - jan(15)).days == 42

    with pytest.raises(CheckViolation) as exc_info:
        await renew_loan(db, loan.loan_id)

    assert exc_info.value.field == "renewed_times"


async def test_returned_loan_cannot_be_renewed_or_returned_again(db, make_member, make_copy, jan):
    loan = await checkout(db, await make_copy(), await make_member(), jan(1), jan(15))
    loan_id = loan.loan_id
    await return_copy(db, loan_id, LoanReturn(return_date=jan(10)))

    with pytest.raises(InvalidStateTransition):
        await renew_loan(db, loan_id)
    with pytest.raises(InvalidStateTransition):
        await return_copy(db, loan_id, LoanReturn(return_date=jan(11)))


@pytest.mark.parametrize(
    "condition, expected",
    [
        ("good", CopyStatus.AVAILABLE),
        ("damaged", CopyStatus.UNDER_REPAIR),
        ("lost", CopyStatus.LOST),
    ],
)
async def test_return_sets_copy_status_from_condition(db, make_member, make_copy, jan, condition, expected):
    copy = await make_copy()
    loan = await checkout(db, copy, await make_member(), jan(1), jan(15))

    loan = await return_copy(db, loan.loan_id, LoanReturn(return_date=jan(10), condition=condition))

    assert loan.return_date == jan(10)
    copy = await db.get(BookCopy, copy.copy_id)
    assert copy.status == expected


async def test_late_return_assesses_fine(db, make_member, make_copy, jan):
    member = await make_member()
    loan = await checkout(db, await make_copy(), member, jan(1), jan(15))

    await return_copy(db, loan.loan_id, LoanReturn(return_date=jan(20)))

    fines = await list_member_fines(db, member.member_id)
    assert len(fines) == 1
    assert fines[0].amount == Decimal("2.50")
    assert fines[0].reason == FineReason.LATE_RETURN
    assert fines[0].payment_status == PaymentStatus.PENDING
    assert fines[0].issue_date == jan(20)


async def test_on_time_return_has_no_fine(db, make_member, make_copy, jan):
    member = await make_member()
    loan = await checkout(db, await make_copy(), member, jan(1), jan(15))

    await return_copy(db, loan.loan_id, LoanReturn(return_date=jan(15)))

    assert await list_member_fines(db, member.member_id) == []


async def test_return_before_checkout_is_rejected(db, make_member, make_copy, jan):
    loan = await checkout(db, await make_copy(), await make_member(), jan(10), jan(20))

    with pytest.raises(CheckViolation) as exc_info:
        await return_copy(db, loan.loan_id, LoanReturn(return_date=jan(5)))

    assert exc_info.value.field == "return_date"


async def test_overdue_is_derived_from_dates(db, make_member, make_copy, jan):
    member = await make_member()
    late = await checkout(db, await make_copy(), member, jan(1), jan(10))
    await checkout(db, await make_copy(), member, jan(1), jan(25))
    returned = await checkout(db, await make_copy(), member, jan(1), jan(5))
    await return_copy(db, returned.loan_id, LoanReturn(return_date=jan(4)))

    overdue = await list_overdue_loans(db, today=jan(20))

    assert [loan.loan_id for loan in overdue] == [late.loan_id]
    assert late.is_overdue(jan(20))
    assert not late.is_overdue(jan(10))


async def test_list_loans_filters_open_loans_by_member(db, make_member, make_copy, jan):
    member = await make_member()
    other = await make_member()
    first = await checkout(db, await make_copy(), member, jan(1))
    await checkout(db, await make_copy(), other, jan(1))
    returned = await checkout(db, await make_copy(), member, jan(2))
    await return_copy(db, returned.loan_id, LoanReturn(return_date=jan(3)))

    total, loans = await list_loans(db, member_id=member.member_id)
    open_total, open_loans = await list_loans(db, member_id=member.member_id, open_only=True)

    assert total == 2
    assert open_total == 1
    assert [loan.loan_id for loan in open_loans] == [first.loan_id]
