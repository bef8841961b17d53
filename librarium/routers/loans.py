import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.exceptions.pagination import paginate_response
from librarium.models.loan import Loan
from librarium.schemas.library import LoanCreate, LoanResponse, LoanReturn
from librarium.services.crud_service import get_or_404
from librarium.services.loan_service import (
    checkout_copy,
    list_loans,
    list_overdue_loans,
    renew_loan,
    return_copy,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/library/loans", tags=["Library Loans"])


@router.post("", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
async def checkout(loan_data: LoanCreate, db: AsyncSession = Depends(get_db)):
    """Видача примірника: лише доступний (або відкладений для цього читача)."""
    return await checkout_copy(db, loan_data)


@router.get("", response_model=dict)
async def get_loans(
    db: AsyncSession = Depends(get_db),
    member_id: Optional[int] = Query(None),
    open_only: bool = Query(False, description="Лише неповернені видачі"),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
):
    total, loans = await list_loans(db, member_id, open_only, page, per_page)
    return paginate_response(
        total,
        page,
        per_page,
        [LoanResponse.model_validate(loan) for loan in loans],
    )


@router.get("/overdue", response_model=List[LoanResponse])
async def get_overdue_loans(
    db: AsyncSession = Depends(get_db),
    member_id: Optional[int] = Query(None),
    as_of: Optional[date] = Query(None, description="Дата, на яку рахувати прострочення"),
):
    """Прострочення обчислюється в момент запиту і ніде не зберігається."""
    return await list_overdue_loans(db, as_of, member_id)


@router.get("/{loan_id}", response_model=LoanResponse)
async def read_loan(loan_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Loan, loan_id)


@router.post("/{loan_id}/renew", response_model=LoanResponse)
async def renew(loan_id: int, db: AsyncSession = Depends(get_db)):
    return await renew_loan(db, loan_id)


@router.post("/{loan_id}/return", response_model=LoanResponse)
async def return_loan(
    loan_id: int,
    return_data: Optional[LoanReturn] = None,
    db: AsyncSession = Depends(get_db),
):
    return await return_copy(db, loan_id, return_data or LoanReturn())
