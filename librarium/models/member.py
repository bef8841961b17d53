from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class MembershipStatus(str, PyEnum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    SUSPENDED = "Suspended"


class Member(Base):
    __tablename__ = "members"

    member_id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    phone = Column(String(20))
    address = Column(String(255))
    membership_date = Column(Date, nullable=False, default=date.today)
    membership_status = Column(
        enum_column(MembershipStatus, "membership_status"),
        default=MembershipStatus.ACTIVE,
        nullable=False,
    )
    membership_expiry = Column(Date)

    card = relationship(
        "MemberCard",
        back_populates="member",
        uselist=False,
        passive_deletes=True,
    )


class MemberCard(Base):
    __tablename__ = "member_cards"
    __table_args__ = (
        CheckConstraint("expiry_date >= issue_date", name="expiry_after_issue"),
    )

    card_id = Column(Integer, primary_key=True, index=True)
    member_id = Column(
        Integer,
        ForeignKey("members.member_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    card_number = Column(String(20), unique=True, nullable=False)
    issue_date = Column(Date, nullable=False, default=date.today)
    expiry_date = Column(Date, nullable=False)

    member = relationship("Member", back_populates="card")
