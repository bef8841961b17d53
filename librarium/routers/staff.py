from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.exceptions.pagination import paginate_response
from librarium.models.staff import Staff
from librarium.schemas.library import StaffCreate, StaffResponse, StaffUpdate
from librarium.services.crud_service import delete_entity, get_or_404, list_entities
from librarium.services.member_service import create_staff, update_staff

router = APIRouter(prefix="/library/staff", tags=["Library Staff"])


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
async def add_staff(staff_data: StaffCreate, db: AsyncSession = Depends(get_db)):
    return await create_staff(db, staff_data.model_dump(exclude_none=True))


@router.get("", response_model=dict)
async def list_staff(
    db: AsyncSession = Depends(get_db),
    supervisor_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
):
    filters = []
    if supervisor_id is not None:
        filters.append(Staff.supervisor_id == supervisor_id)

    total, staff = await list_entities(db, Staff, page, per_page, filters)
    return paginate_response(
        total,
        page,
        per_page,
        [StaffResponse.model_validate(s) for s in staff],
    )


@router.get("/{staff_id}", response_model=StaffResponse)
async def read_staff(staff_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Staff, staff_id)


@router.patch("/{staff_id}", response_model=StaffResponse)
async def change_staff(
    staff_id: int,
    staff_data: StaffUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Новий керівник не може бути підлеглим цього співробітника."""
    return await update_staff(db, staff_id, staff_data.model_dump(exclude_unset=True))


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff(staff_id: int, db: AsyncSession = Depends(get_db)):
    """Підлеглі лишаються без керівника (supervisor_id стає NULL)."""
    await delete_entity(db, Staff, staff_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
