from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import Column, Date, ForeignKey, Integer, String

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class StaffRole(str, PyEnum):
    LIBRARIAN = "Librarian"
    ASSISTANT = "Assistant"
    MANAGER = "Manager"
    ADMINISTRATOR = "Administrator"


class Staff(Base):
    __tablename__ = "staff"

    staff_id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    phone = Column(String(20))
    role = Column(enum_column(StaffRole, "role"), nullable=False)
    hire_date = Column(Date, nullable=False, default=date.today)
    supervisor_id = Column(
        Integer,
        ForeignKey("staff.staff_id", ondelete="SET NULL"),
        nullable=True,
    )

    parent_column = "supervisor_id"
