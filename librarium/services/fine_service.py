import logging
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import atomic
from librarium.exceptions.errors import InvalidStateTransition, NotFound
from librarium.models.fine import Fine, PaymentStatus
from librarium.models.loan import Loan
from librarium.models.member import Member
from librarium.schemas.library import FineCreate
from librarium.services.crud_service import create_entity, ensure_references, get_or_404

logger = logging.getLogger(__name__)


async def lock_fine(db: AsyncSession, fine_id: int) -> Fine:
    result = await db.execute(
        select(Fine)
        .where(Fine.fine_id == fine_id)
        .with_for_update()
        .execution_options(populate_existing=True),
    )
    fine = result.scalars().first()
    if fine is None:
        raise NotFound("Fine", fine_id)
    return fine


async def create_fine(db: AsyncSession, fine_data: FineCreate) -> Fine:
    """Fines hang off a loan; the member is reached through it."""
    await ensure_references(db, {"loan_id": (Loan, fine_data.loan_id)})

    fine = await create_entity(
        db,
        Fine,
        {
            "loan_id": fine_data.loan_id,
            "amount": fine_data.amount,
            "reason": fine_data.reason,
            "payment_status": PaymentStatus.PENDING,
        },
    )
    logger.info(f"Fine {fine.fine_id} of {fine.amount} issued on loan {fine.loan_id}")
    return fine


async def pay_fine(
    db: AsyncSession,
    fine_id: int,
    paid_date: Optional[date] = None,
) -> Fine:
    async with atomic(db):
        fine = await lock_fine(db, fine_id)
        if fine.payment_status != PaymentStatus.PENDING:
            raise InvalidStateTransition("Fine", fine.payment_status, PaymentStatus.PAID)
        fine.payment_status = PaymentStatus.PAID
        fine.paid_date = paid_date or date.today()

    logger.info(f"Fine {fine_id} paid on {fine.paid_date}")
    return fine


async def waive_fine(db: AsyncSession, fine_id: int) -> Fine:
    async with atomic(db):
        fine = await lock_fine(db, fine_id)
        if fine.payment_status != PaymentStatus.PENDING:
            raise InvalidStateTransition("Fine", fine.payment_status, PaymentStatus.WAIVED)
        fine.payment_status = PaymentStatus.WAIVED

    logger.info(f"Fine {fine_id} waived")
    return fine


async def list_member_fines(
    db: AsyncSession,
    member_id: int,
    payment_status: Optional[PaymentStatus] = None,
) -> list[Fine]:
    await get_or_404(db, Member, member_id)

    query = select(Fine).join(Loan, Loan.loan_id == Fine.loan_id).where(
        Loan.member_id == member_id,
    )
    if payment_status is not None:
        query = query.where(Fine.payment_status == payment_status)

    result = await db.execute(query.order_by(Fine.issue_date, Fine.fine_id))
    return result.scalars().all()
