from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.models.reservation import Reservation, ReservationStatus
from librarium.schemas.library import (
    ReservationCreate,
    ReservationFulfill,
    ReservationResponse,
)
from librarium.services.crud_service import get_or_404
from librarium.services.reservation_service import (
    cancel_reservation,
    create_reservation,
    expire_reservation,
    expire_reservations,
    fulfill_reservation,
    list_reservations,
)

router = APIRouter(prefix="/library/reservations", tags=["Library Reservations"])


@router.post(
    "",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reserve_book(
    reservation_data: ReservationCreate,
    db: AsyncSession = Depends(get_db),
):
    return await create_reservation(db, reservation_data)


@router.get("", response_model=List[ReservationResponse])
async def get_reservations(
    db: AsyncSession = Depends(get_db),
    member_id: Optional[int] = Query(None),
    book_id: Optional[int] = Query(None),
    status: Optional[ReservationStatus] = Query(
        None,
        description="Фільтр за статусом бронювання",
    ),
):
    return await list_reservations(db, member_id, book_id, status)


@router.post("/expire", response_model=dict)
async def expire_lapsed_reservations(db: AsyncSession = Depends(get_db)):
    """Те саме, що робить нічне завдання Celery."""
    expired = await expire_reservations(db)
    return {"message": "Lapsed reservations expired", "expired": expired}


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def read_reservation(reservation_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Reservation, reservation_id)


@router.post("/{reservation_id}/fulfill", response_model=ReservationResponse)
async def fulfill(
    reservation_id: int,
    fulfill_data: Optional[ReservationFulfill] = None,
    db: AsyncSession = Depends(get_db),
):
    """Відкладає примірник для читача: примірник стає Reserved."""
    copy_id = fulfill_data.copy_id if fulfill_data else None
    return await fulfill_reservation(db, reservation_id, copy_id)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel(reservation_id: int, db: AsyncSession = Depends(get_db)):
    return await cancel_reservation(db, reservation_id)


@router.post("/{reservation_id}/expire", response_model=ReservationResponse)
async def expire(reservation_id: int, db: AsyncSession = Depends(get_db)):
    return await expire_reservation(db, reservation_id)
