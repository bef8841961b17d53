from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class CopyStatus(str, PyEnum):
    AVAILABLE = "Available"
    ON_LOAN = "On Loan"
    RESERVED = "Reserved"
    LOST = "Lost"
    UNDER_REPAIR = "Under Repair"


class BookCopy(Base):
    __tablename__ = "book_copies"

    copy_id = Column(Integer, primary_key=True, index=True)
    book_id = Column(
        Integer,
        ForeignKey("books.book_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    barcode = Column(String(50), unique=True, nullable=False)
    acquisition_date = Column(Date, nullable=False, default=date.today)
    price = Column(Numeric(10, 2))
    status = Column(
        enum_column(CopyStatus, "status"),
        default=CopyStatus.AVAILABLE,
        nullable=False,
    )
    location = Column(String(50))
