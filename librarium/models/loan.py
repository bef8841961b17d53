from datetime import date

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Index, Integer, text

from librarium.dependencies.database import Base


class Loan(Base):
    __tablename__ = "loans"
    __table_args__ = (
        CheckConstraint("due_date >= checkout_date", name="due_date"),
        CheckConstraint(
            "return_date IS NULL OR return_date >= checkout_date",
            name="return_date",
        ),
        CheckConstraint(
            "renewed_times >= 0 AND renewed_times <= 3",
            name="renewed_times",
        ),
        # Не більше однієї відкритої видачі на фізичний примірник
        Index(
            "uq_loans_open_copy",
            "copy_id",
            unique=True,
            sqlite_where=text("return_date IS NULL"),
            postgresql_where=text("return_date IS NULL"),
        ),
    )

    loan_id = Column(Integer, primary_key=True, index=True)
    copy_id = Column(
        Integer,
        ForeignKey("book_copies.copy_id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id = Column(
        Integer,
        ForeignKey("members.member_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    staff_id = Column(
        Integer,
        ForeignKey("staff.staff_id", ondelete="SET NULL"),
        nullable=True,
    )
    checkout_date = Column(Date, nullable=False, default=date.today)
    due_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=True)
    renewed_times = Column(Integer, nullable=False, default=0)

    def is_overdue(self, today: date = None) -> bool:
        today = today or date.today()
        return self.return_date is None and self.due_date < today
