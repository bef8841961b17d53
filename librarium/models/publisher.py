from sqlalchemy import Column, Integer, String

from librarium.dependencies.database import Base


class Publisher(Base):
    __tablename__ = "publishers"

    publisher_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    address = Column(String(255))
    phone = Column(String(20))
    email = Column(String(100))
    website = Column(String(255))
    established_year = Column(Integer)
