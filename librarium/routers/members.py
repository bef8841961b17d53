from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.exceptions.pagination import paginate_response
from librarium.models.member import Member, MembershipStatus
from librarium.schemas.library import (
    MemberCardCreate,
    MemberCardResponse,
    MemberCreate,
    MemberResponse,
    MemberUpdate,
)
from librarium.services.crud_service import (
    create_entity,
    delete_entity,
    get_or_404,
    list_entities,
    update_entity,
)
from librarium.services.member_service import get_card, issue_card

router = APIRouter(prefix="/library/members", tags=["Library Members"])


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(member_data: MemberCreate, db: AsyncSession = Depends(get_db)):
    return await create_entity(db, Member, member_data.model_dump(exclude_none=True))


@router.get("", response_model=dict)
async def list_members(
    db: AsyncSession = Depends(get_db),
    membership_status: Optional[MembershipStatus] = Query(None),
    page: int = Query(1, ge=1, description="Номер сторінки"),
    per_page: int = Query(50, ge=1, le=100, description="Кількість записів"),
):
    filters = []
    if membership_status is not None:
        filters.append(Member.membership_status == membership_status)

    total, members = await list_entities(db, Member, page, per_page, filters)
    return paginate_response(
        total,
        page,
        per_page,
        [MemberResponse.model_validate(m) for m in members],
    )


@router.get("/{member_id}", response_model=MemberResponse)
async def read_member(member_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Member, member_id)


@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: int,
    member_data: MemberUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Статус членства змінюється лише ззовні, автоматичного завершення немає."""
    member = await get_or_404(db, Member, member_id)
    return await update_entity(db, member, member_data.model_dump(exclude_unset=True))


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(member_id: int, db: AsyncSession = Depends(get_db)):
    """Картка, видачі та бронювання члена видаляються каскадно."""
    await delete_entity(db, Member, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{member_id}/card",
    response_model=MemberCardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_member_card(
    member_id: int,
    card_data: MemberCardCreate,
    db: AsyncSession = Depends(get_db),
):
    return await issue_card(db, member_id, card_data)


@router.get("/{member_id}/card", response_model=MemberCardResponse)
async def read_member_card(member_id: int, db: AsyncSession = Depends(get_db)):
    return await get_card(db, member_id)
