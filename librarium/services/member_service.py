from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.exceptions.errors import NotFound
from librarium.models.member import Member, MemberCard
from librarium.models.staff import Staff
from librarium.schemas.library import MemberCardCreate
from librarium.services.crud_service import create_entity, get_or_404, update_entity
from librarium.services.hierarchy import ensure_acyclic


async def issue_card(db: AsyncSession, member_id: int, card_data: MemberCardCreate) -> MemberCard:
    """A member holds exactly one card; a second one trips the unique member_id."""
    await get_or_404(db, Member, member_id)

    return await create_entity(
        db,
        MemberCard,
        {
            "member_id": member_id,
            "card_number": card_data.card_number,
            "issue_date": card_data.issue_date or date.today(),
            "expiry_date": card_data.expiry_date,
        },
    )


async def get_card(db: AsyncSession, member_id: int) -> MemberCard:
    await get_or_404(db, Member, member_id)

    result = await db.execute(select(MemberCard).where(MemberCard.member_id == member_id))
    card = result.scalars().first()
    if card is None:
        raise NotFound("MemberCard", member_id)
    return card


async def create_staff(db: AsyncSession, data: dict) -> Staff:
    await ensure_acyclic(db, Staff, None, data.get("supervisor_id"))
    return await create_entity(db, Staff, data)


async def update_staff(db: AsyncSession, staff_id: int, changes: dict) -> Staff:
    staff = await get_or_404(db, Staff, staff_id)
    if "supervisor_id" in changes:
        await ensure_acyclic(db, Staff, staff_id, changes["supervisor_id"])
    return await update_entity(db, staff, changes)
