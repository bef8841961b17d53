from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, Numeric

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class FineReason(str, PyEnum):
    LATE_RETURN = "Late Return"
    DAMAGED_ITEM = "Damaged Item"
    LOST_ITEM = "Lost Item"


class PaymentStatus(str, PyEnum):
    PENDING = "Pending"
    PAID = "Paid"
    WAIVED = "Waived"


class Fine(Base):
    __tablename__ = "fines"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount"),
        CheckConstraint(
            "(payment_status = 'Paid' AND paid_date IS NOT NULL) "
            "OR (payment_status <> 'Paid' AND paid_date IS NULL)",
            name="paid_date",
        ),
    )

    fine_id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(
        Integer,
        ForeignKey("loans.loan_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(10, 2), nullable=False)
    reason = Column(enum_column(FineReason, "reason"), nullable=False)
    issue_date = Column(Date, nullable=False, default=date.today)
    payment_status = Column(
        enum_column(PaymentStatus, "payment_status"),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    paid_date = Column(Date, nullable=True)
