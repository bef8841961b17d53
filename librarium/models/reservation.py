from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class ReservationStatus(str, PyEnum):
    PENDING = "Pending"
    FULFILLED = "Fulfilled"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("expiry_date >= reservation_date", name="expiry_date"),
    )

    reservation_id = Column(Integer, primary_key=True, index=True)
    book_id = Column(
        Integer,
        ForeignKey("books.book_id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id = Column(
        Integer,
        ForeignKey("members.member_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    copy_id = Column(
        Integer,
        ForeignKey("book_copies.copy_id", ondelete="SET NULL"),
        nullable=True,
    )
    reservation_date = Column(Date, nullable=False, default=date.today)
    expiry_date = Column(Date, nullable=False)
    status = Column(
        enum_column(ReservationStatus, "status"),
        default=ReservationStatus.PENDING,
        nullable=False,
    )
