from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.models.fine import Fine, PaymentStatus
from librarium.schemas.library import FineCreate, FinePayment, FineResponse
from librarium.services.crud_service import get_or_404
from librarium.services.fine_service import (
    create_fine,
    list_member_fines,
    pay_fine,
    waive_fine,
)

router = APIRouter(prefix="/library", tags=["Library Fines"])


@router.post("/fines", response_model=FineResponse, status_code=status.HTTP_201_CREATED)
async def issue_fine(fine_data: FineCreate, db: AsyncSession = Depends(get_db)):
    return await create_fine(db, fine_data)


@router.get("/fines/{fine_id}", response_model=FineResponse)
async def read_fine(fine_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Fine, fine_id)


@router.post("/fines/{fine_id}/pay", response_model=FineResponse)
async def pay(
    fine_id: int,
    payment: Optional[FinePayment] = None,
    db: AsyncSession = Depends(get_db),
):
    return await pay_fine(db, fine_id, payment.paid_date if payment else None)


@router.post("/fines/{fine_id}/waive", response_model=FineResponse)
async def waive(fine_id: int, db: AsyncSession = Depends(get_db)):
    return await waive_fine(db, fine_id)


@router.get("/members/{member_id}/fines", response_model=List[FineResponse])
async def get_member_fines(
    member_id: int,
    db: AsyncSession = Depends(get_db),
    payment_status: Optional[PaymentStatus] = Query(None),
):
    """Штрафи читача знаходяться через його видачі."""
    return await list_member_fines(db, member_id, payment_status)
