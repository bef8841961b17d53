"""Checkout, renewal and return of physical copies.

A loan is open while ``return_date`` is null and returned once it is set.
Overdue is never stored: it is ``return_date IS NULL AND due_date < today``
evaluated when the question is asked.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.config import config
from librarium.dependencies.database import atomic
from librarium.exceptions.errors import (
    CheckViolation,
    InvalidStateTransition,
    NotFound,
    UniqueViolation,
)
from librarium.exceptions.pagination import page_offset
from librarium.models.book_copy import BookCopy, CopyStatus
from librarium.models.fine import Fine, FineReason
from librarium.models.loan import Loan
from librarium.models.member import Member, MembershipStatus
from librarium.models.reservation import Reservation, ReservationStatus
from librarium.models.staff import Staff
from librarium.schemas.library import LoanCreate, LoanReturn
from librarium.services.crud_service import ensure_references, get_or_404

logger = logging.getLogger(__name__)

RETURN_CONDITIONS = {
    "good": CopyStatus.AVAILABLE,
    "damaged": CopyStatus.UNDER_REPAIR,
    "lost": CopyStatus.LOST,
}


async def lock_copy(db: AsyncSession, copy_id: int) -> BookCopy:
    result = await db.execute(
        select(BookCopy)
        .where(BookCopy.copy_id == copy_id)
        .with_for_update()
        .execution_options(populate_existing=True),
    )
    copy = result.scalars().first()
    if copy is None:
        raise NotFound("BookCopy", copy_id)
    return copy


async def lock_loan(db: AsyncSession, loan_id: int) -> Loan:
    result = await db.execute(
        select(Loan)
        .where(Loan.loan_id == loan_id)
        .with_for_update()
        .execution_options(populate_existing=True),
    )
    loan = result.scalars().first()
    if loan is None:
        raise NotFound("Loan", loan_id)
    return loan


async def get_open_loan(db: AsyncSession, copy_id: int) -> Optional[Loan]:
    result = await db.execute(
        select(Loan).where(Loan.copy_id == copy_id, Loan.return_date.is_(None)),
    )
    return result.scalars().first()


async def get_live_hold(db: AsyncSession, copy_id: int) -> Optional[Reservation]:
    """The fulfilled reservation currently holding the copy, if any.

    A hold is released on pickup, so only the latest one can still point here.
    """
    result = await db.execute(
        select(Reservation)
        .where(
            Reservation.copy_id == copy_id,
            Reservation.status == ReservationStatus.FULFILLED,
        )
        .order_by(Reservation.reservation_id.desc())
        .limit(1)
        .with_for_update()
        .execution_options(populate_existing=True),
    )
    return result.scalars().first()


async def checkout_copy(
    db: AsyncSession,
    loan_data: LoanCreate,
    today: Optional[date] = None,
) -> Loan:
    today = today or date.today()
    checkout_date = loan_data.checkout_date or today
    due_date = loan_data.due_date or checkout_date + timedelta(
        days=config.LOAN_PERIOD_DAYS,
    )

    async with atomic(db):
        copy = await lock_copy(db, loan_data.copy_id)
        member = await get_or_404(db, Member, loan_data.member_id)
        await ensure_references(db, {"staff_id": (Staff, loan_data.staff_id)})

        open_loan = await get_open_loan(db, copy.copy_id)
        if open_loan is not None:
            raise UniqueViolation(
                "copy_id",
                "uq_loans_open_copy",
                f"Copy {copy.copy_id} is already out on loan {open_loan.loan_id}",
            )

        if member.membership_status != MembershipStatus.ACTIVE:
            raise InvalidStateTransition(
                "Member",
                member.membership_status,
                MembershipStatus.ACTIVE,
                message=f"Member {member.member_id} is {member.membership_status.value} and cannot borrow",
            )

        # Заброньований примірник може забрати лише той, для кого його відклали
        hold = None
        if copy.status == CopyStatus.RESERVED:
            hold = await get_live_hold(db, copy.copy_id)
            if hold is None or hold.member_id != member.member_id:
                raise InvalidStateTransition(
                    "BookCopy",
                    copy.status,
                    CopyStatus.ON_LOAN,
                    message=f"Copy {copy.copy_id} is not held for member {member.member_id}",
                )
        elif copy.status != CopyStatus.AVAILABLE:
            raise InvalidStateTransition("BookCopy", copy.status, CopyStatus.ON_LOAN)

        loan = Loan(
            copy_id=copy.copy_id,
            member_id=member.member_id,
            staff_id=loan_data.staff_id,
            checkout_date=checkout_date,
            due_date=due_date,
            renewed_times=0,
        )
        db.add(loan)
        copy.status = CopyStatus.ON_LOAN
        if hold is not None:
            # Бронювання використане, примірник більше не відкладений
            hold.copy_id = None
        await db.flush()

    logger.info(
        f"Copy {loan.copy_id} checked out to member {loan.member_id} as loan {loan.loan_id}, due {loan.due_date}",
    )
    return loan


async def renew_loan(db: AsyncSession, loan_id: int) -> Loan:
    async with atomic(db):
        loan = await lock_loan(db, loan_id)

        if loan.return_date is not None:
            raise InvalidStateTransition(
                "Loan",
                "Returned",
                "Renewed",
                message=f"Loan {loan_id} was already returned on {loan.return_date}",
            )

        if loan.renewed_times >= config.MAX_RENEWALS:
            raise CheckViolation(
                "renewed_times",
                "ck_loans_renewed_times",
                f"Loan {loan_id} has already been renewed {loan.renewed_times} times",
            )

        loan.renewed_times += 1
        loan.due_date = loan.due_date + timedelta(days=config.LOAN_PERIOD_DAYS)

    logger.info(f"Loan {loan_id} renewed ({loan.renewed_times}), due {loan.due_date}")
    return loan


async def return_copy(
    db: AsyncSession,
    loan_id: int,
    return_data: LoanReturn,
    today: Optional[date] = None,
) -> Loan:
    """Close the loan, release the copy and charge a late fee if due."""
    return_date = return_data.return_date or today or date.today()

    async with atomic(db):
        loan = await lock_loan(db, loan_id)

        if loan.return_date is not None:
            raise InvalidStateTransition(
                "Loan",
                "Returned",
                "Returned",
                message=f"Loan {loan_id} was already returned on {loan.return_date}",
            )

        if return_date < loan.checkout_date:
            raise CheckViolation(
                "return_date",
                "ck_loans_return_date",
                "return_date cannot precede checkout_date",
            )

        copy = await lock_copy(db, loan.copy_id)
        loan.return_date = return_date
        copy.status = RETURN_CONDITIONS[return_data.condition]

        days_late = (return_date - loan.due_date).days
        if days_late > 0 and config.LATE_FEE_PER_DAY > 0:
            db.add(
                Fine(
                    loan_id=loan.loan_id,
                    amount=Decimal(config.LATE_FEE_PER_DAY) * days_late,
                    reason=FineReason.LATE_RETURN,
                    issue_date=return_date,
                ),
            )
            logger.info(f"Loan {loan_id} returned {days_late} day(s) late, fine assessed")

    logger.info(f"Loan {loan_id} returned, copy {copy.copy_id} is now {copy.status.value}")
    return loan


async def list_loans(
    db: AsyncSession,
    member_id: Optional[int] = None,
    open_only: bool = False,
    page: int = 1,
    per_page: int = 50,
):
    query = select(Loan)
    if member_id is not None:
        query = query.where(Loan.member_id == member_id)
    if open_only:
        query = query.where(Loan.return_date.is_(None))

    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(
        query.order_by(Loan.checkout_date.desc(), Loan.loan_id.desc())
        .limit(per_page)
        .offset(page_offset(page, per_page)),
    )
    return total, result.scalars().all()


async def list_overdue_loans(
    db: AsyncSession,
    today: Optional[date] = None,
    member_id: Optional[int] = None,
) -> list[Loan]:
    today = today or date.today()
    query = select(Loan).where(Loan.return_date.is_(None), Loan.due_date < today)
    if member_id is not None:
        query = query.where(Loan.member_id == member_id)

    result = await db.execute(query.order_by(Loan.due_date))
    return result.scalars().all()
