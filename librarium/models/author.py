from sqlalchemy import CheckConstraint, Column, Integer, String, Text

from librarium.dependencies.database import Base


class Author(Base):
    __tablename__ = "authors"
    __table_args__ = (
        CheckConstraint(
            "death_year IS NULL OR birth_year IS NULL OR death_year >= birth_year",
            name="death_year",
        ),
    )

    author_id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False, index=True)
    birth_year = Column(Integer)
    death_year = Column(Integer)
    nationality = Column(String(50))
    biography = Column(Text)
