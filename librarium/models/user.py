from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Integer, String, func

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class UserRole(str, PyEnum):
    ADMIN = "admin"
    USER = "user"


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(50))
    last_name = Column(String(50))
    created_at = Column(DateTime, server_default=func.now())
    role = Column(
        enum_column(UserRole, "role"),
        default=UserRole.USER,
        nullable=False,
    )
