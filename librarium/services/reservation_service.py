import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.config import config
from librarium.dependencies.database import atomic
from librarium.exceptions.errors import (
    CheckViolation,
    InvalidStateTransition,
    NotFound,
    UniqueViolation,
)
from librarium.models.book import Book
from librarium.models.book_copy import BookCopy, CopyStatus
from librarium.models.member import Member, MembershipStatus
from librarium.models.reservation import Reservation, ReservationStatus
from librarium.schemas.library import ReservationCreate
from librarium.services.crud_service import get_or_404
from librarium.services.loan_service import lock_copy

logger = logging.getLogger(__name__)


async def lock_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    result = await db.execute(
        select(Reservation)
        .where(Reservation.reservation_id == reservation_id)
        .with_for_update()
        .execution_options(populate_existing=True),
    )
    reservation = result.scalars().first()
    if reservation is None:
        raise NotFound("Reservation", reservation_id)
    return reservation


async def create_reservation(
    db: AsyncSession,
    reservation_data: ReservationCreate,
    today: Optional[date] = None,
) -> Reservation:
    reservation_date = reservation_data.reservation_date or today or date.today()
    expiry_date = reservation_data.expiry_date or reservation_date + timedelta(
        days=config.RESERVATION_HOLD_DAYS,
    )

    async with atomic(db):
        member = await get_or_404(db, Member, reservation_data.member_id)
        await get_or_404(db, Book, reservation_data.book_id)

        if member.membership_status != MembershipStatus.ACTIVE:
            raise InvalidStateTransition(
                "Member",
                member.membership_status,
                MembershipStatus.ACTIVE,
                message=f"Member {member.member_id} is {member.membership_status.value} and cannot reserve",
            )

        existing = await db.scalar(
            select(Reservation.reservation_id).where(
                Reservation.member_id == member.member_id,
                Reservation.book_id == reservation_data.book_id,
                Reservation.status == ReservationStatus.PENDING,
            ),
        )
        if existing is not None:
            raise UniqueViolation(
                "book_id",
                "one_pending_reservation",
                f"Member {member.member_id} already has pending reservation {existing} for this book",
            )

        reservation = Reservation(
            book_id=reservation_data.book_id,
            member_id=member.member_id,
            reservation_date=reservation_date,
            expiry_date=expiry_date,
            status=ReservationStatus.PENDING,
        )
        db.add(reservation)
        await db.flush()

    logger.info(
        f"Reservation {reservation.reservation_id} placed by member {reservation.member_id} for book {reservation.book_id}",
    )
    return reservation


async def _first_available_copy(db: AsyncSession, book_id: int) -> Optional[BookCopy]:
    result = await db.execute(
        select(BookCopy)
        .where(BookCopy.book_id == book_id, BookCopy.status == CopyStatus.AVAILABLE)
        .order_by(BookCopy.copy_id)
        .limit(1)
        .with_for_update()
        .execution_options(populate_existing=True),
    )
    return result.scalars().first()


async def fulfill_reservation(
    db: AsyncSession,
    reservation_id: int,
    copy_id: Optional[int] = None,
    today: Optional[date] = None,
) -> Reservation:
    """Hold a copy for the member: copy becomes Reserved, reservation Fulfilled."""
    today = today or date.today()

    async with atomic(db):
        reservation = await lock_reservation(db, reservation_id)

        if reservation.status != ReservationStatus.PENDING:
            raise InvalidStateTransition(
                "Reservation",
                reservation.status,
                ReservationStatus.FULFILLED,
            )
        if reservation.expiry_date < today:
            raise InvalidStateTransition(
                "Reservation",
                reservation.status,
                ReservationStatus.FULFILLED,
                message=f"Reservation {reservation_id} lapsed on {reservation.expiry_date}",
            )

        if copy_id is not None:
            copy = await lock_copy(db, copy_id)
            if copy.book_id != reservation.book_id:
                raise CheckViolation(
                    "copy_id",
                    message=f"Copy {copy_id} does not belong to book {reservation.book_id}",
                )
            if copy.status != CopyStatus.AVAILABLE:
                raise InvalidStateTransition("BookCopy", copy.status, CopyStatus.RESERVED)
        else:
            copy = await _first_available_copy(db, reservation.book_id)
            if copy is None:
                raise InvalidStateTransition(
                    "BookCopy",
                    "Unavailable",
                    CopyStatus.RESERVED,
                    message=f"No available copy of book {reservation.book_id}",
                )

        copy.status = CopyStatus.RESERVED
        reservation.copy_id = copy.copy_id
        reservation.status = ReservationStatus.FULFILLED

    logger.info(f"Reservation {reservation_id} fulfilled with copy {reservation.copy_id}")
    return reservation


async def cancel_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    async with atomic(db):
        reservation = await lock_reservation(db, reservation_id)
        if reservation.status != ReservationStatus.PENDING:
            raise InvalidStateTransition(
                "Reservation",
                reservation.status,
                ReservationStatus.CANCELLED,
            )
        reservation.status = ReservationStatus.CANCELLED

    logger.info(f"Reservation {reservation_id} cancelled")
    return reservation


async def expire_reservation(
    db: AsyncSession,
    reservation_id: int,
    today: Optional[date] = None,
) -> Reservation:
    today = today or date.today()

    async with atomic(db):
        reservation = await lock_reservation(db, reservation_id)
        if (
            reservation.status != ReservationStatus.PENDING
            or reservation.expiry_date >= today
        ):
            raise InvalidStateTransition(
                "Reservation",
                reservation.status,
                ReservationStatus.EXPIRED,
                message=f"Reservation {reservation_id} is not a lapsed pending reservation",
            )
        reservation.status = ReservationStatus.EXPIRED

    logger.info(f"Reservation {reservation_id} expired")
    return reservation


async def expire_reservations(db: AsyncSession, today: Optional[date] = None) -> int:
    """Mark every pending reservation past its expiry date as Expired."""
    today = today or date.today()

    async with atomic(db):
        result = await db.execute(
            update(Reservation)
            .where(
                Reservation.status == ReservationStatus.PENDING,
                Reservation.expiry_date < today,
            )
            .values(status=ReservationStatus.EXPIRED)
            .execution_options(synchronize_session=False),
        )
        expired = result.rowcount

    db.expunge_all()
    logger.info(f"🕓 Expired {expired} pending reservation(s)")
    return expired


async def list_reservations(
    db: AsyncSession,
    member_id: Optional[int] = None,
    book_id: Optional[int] = None,
    status: Optional[ReservationStatus] = None,
) -> list[Reservation]:
    query = select(Reservation)
    if member_id is not None:
        query = query.where(Reservation.member_id == member_id)
    if book_id is not None:
        query = query.where(Reservation.book_id == book_id)
    if status is not None:
        query = query.where(Reservation.status == status)

    result = await db.execute(query.order_by(Reservation.reservation_date, Reservation.reservation_id))
    return result.scalars().all()
