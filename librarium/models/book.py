from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from librarium.dependencies.database import Base
from librarium.models.types import enum_column


class AuthorRole(str, PyEnum):
    PRIMARY = "Primary"
    CO_AUTHOR = "Co-author"
    EDITOR = "Editor"
    TRANSLATOR = "Translator"


class Book(Base):
    __tablename__ = "books"

    book_id = Column(Integer, primary_key=True, index=True)
    isbn = Column(String(20), unique=True, nullable=False)
    title = Column(String(255), nullable=False, index=True)
    publisher_id = Column(
        Integer,
        ForeignKey("publishers.publisher_id", ondelete="SET NULL"),
        nullable=True,
    )
    publication_year = Column(Integer)
    edition = Column(String(20))
    pages = Column(Integer)
    language = Column(String(30))
    description = Column(Text)
    added_date = Column(Date, nullable=False, default=date.today)

    author_links = relationship(
        "BookAuthor",
        back_populates="book",
        lazy="selectin",
        passive_deletes=True,
    )
    category_links = relationship(
        "BookCategory",
        back_populates="book",
        lazy="selectin",
        passive_deletes=True,
    )


class BookAuthor(Base):
    __tablename__ = "book_authors"

    book_id = Column(
        Integer,
        ForeignKey("books.book_id", ondelete="CASCADE"),
        primary_key=True,
    )
    author_id = Column(
        Integer,
        ForeignKey("authors.author_id", ondelete="CASCADE"),
        primary_key=True,
    )
    role = Column(
        enum_column(AuthorRole, "role"),
        default=AuthorRole.PRIMARY,
        nullable=False,
    )

    book = relationship("Book", back_populates="author_links")


class BookCategory(Base):
    __tablename__ = "book_categories"

    book_id = Column(
        Integer,
        ForeignKey("books.book_id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id = Column(
        Integer,
        ForeignKey("categories.category_id", ondelete="CASCADE"),
        primary_key=True,
    )

    book = relationship("Book", back_populates="category_links")
