from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from librarium.dependencies.database import atomic
from librarium.exceptions.errors import InvalidStateTransition, NotFound
from librarium.models.author import Author
from librarium.models.book import AuthorRole, Book, BookAuthor, BookCategory
from librarium.models.book_copy import BookCopy, CopyStatus
from librarium.models.category import Category
from librarium.models.loan import Loan
from librarium.models.publisher import Publisher
from librarium.schemas.library import BookCopyCreate, BookCreate
from librarium.services.crud_service import (
    create_entity,
    ensure_references,
    get_or_404,
    update_entity,
)
from librarium.services.hierarchy import ensure_acyclic


async def create_category(db: AsyncSession, data: dict) -> Category:
    await ensure_acyclic(db, Category, None, data.get("parent_category_id"))
    return await create_entity(db, Category, data)


async def update_category(db: AsyncSession, category_id: int, changes: dict) -> Category:
    category = await get_or_404(db, Category, category_id)
    if "parent_category_id" in changes:
        await ensure_acyclic(db, Category, category_id, changes["parent_category_id"])
    return await update_entity(db, category, changes)


async def get_book(db: AsyncSession, book_id: int) -> Book:
    result = await db.execute(
        select(Book)
        .options(selectinload(Book.author_links), selectinload(Book.category_links))
        .where(Book.book_id == book_id)
        .execution_options(populate_existing=True),
    )
    book = result.scalars().first()
    if not book:
        raise NotFound("Book", book_id)
    return book


async def create_book(db: AsyncSession, book_data: BookCreate) -> Book:
    """Book row, its author links and category links in one transaction."""
    data = book_data.model_dump(exclude={"authors", "category_ids"})
    category_ids = list(dict.fromkeys(book_data.category_ids))

    await ensure_references(db, {"publisher_id": (Publisher, data["publisher_id"])})
    for link in book_data.authors:
        await ensure_references(db, {"author_id": (Author, link.author_id)})
    for category_id in category_ids:
        await ensure_references(db, {"category_id": (Category, category_id)})

    async with atomic(db):
        book = Book(**data)
        db.add(book)
        await db.flush()

        for link in book_data.authors:
            db.add(
                BookAuthor(
                    book_id=book.book_id,
                    author_id=link.author_id,
                    role=link.role,
                ),
            )
        for category_id in category_ids:
            db.add(BookCategory(book_id=book.book_id, category_id=category_id))

    return await get_book(db, book.book_id)


async def update_book(db: AsyncSession, book_id: int, changes: dict) -> Book:
    book = await get_book(db, book_id)
    if "publisher_id" in changes:
        await ensure_references(
            db,
            {"publisher_id": (Publisher, changes["publisher_id"])},
        )
    await update_entity(db, book, changes)
    return await get_book(db, book_id)


async def link_author(
    db: AsyncSession,
    book_id: int,
    author_id: int,
    role: AuthorRole = AuthorRole.PRIMARY,
) -> Book:
    await get_or_404(db, Book, book_id)
    await ensure_references(db, {"author_id": (Author, author_id)})

    async with atomic(db):
        db.add(BookAuthor(book_id=book_id, author_id=author_id, role=role))

    return await get_book(db, book_id)


async def unlink_author(db: AsyncSession, book_id: int, author_id: int) -> Book:
    link = await db.get(BookAuthor, (book_id, author_id))
    if link is None:
        raise NotFound("BookAuthor", f"{book_id}/{author_id}")

    async with atomic(db):
        await db.execute(
            delete(BookAuthor).where(
                BookAuthor.book_id == book_id,
                BookAuthor.author_id == author_id,
            ),
        )

    return await get_book(db, book_id)


async def link_category(db: AsyncSession, book_id: int, category_id: int) -> Book:
    await get_or_404(db, Book, book_id)
    await ensure_references(db, {"category_id": (Category, category_id)})

    async with atomic(db):
        db.add(BookCategory(book_id=book_id, category_id=category_id))

    return await get_book(db, book_id)


async def unlink_category(db: AsyncSession, book_id: int, category_id: int) -> Book:
    link = await db.get(BookCategory, (book_id, category_id))
    if link is None:
        raise NotFound("BookCategory", f"{book_id}/{category_id}")

    async with atomic(db):
        await db.execute(
            delete(BookCategory).where(
                BookCategory.book_id == book_id,
                BookCategory.category_id == category_id,
            ),
        )

    return await get_book(db, book_id)


async def add_copy(db: AsyncSession, book_id: int, copy_data: BookCopyCreate) -> BookCopy:
    await get_or_404(db, Book, book_id)
    data = copy_data.model_dump(exclude_none=True)
    return await create_entity(db, BookCopy, {**data, "book_id": book_id})


async def list_copies(
    db: AsyncSession,
    book_id: int,
    status: Optional[CopyStatus] = None,
) -> list[BookCopy]:
    await get_or_404(db, Book, book_id)

    query = select(BookCopy).where(BookCopy.book_id == book_id)
    if status is not None:
        query = query.where(BookCopy.status == status)

    result = await db.execute(query.order_by(BookCopy.copy_id))
    return result.scalars().all()


async def update_copy(db: AsyncSession, copy_id: int, changes: dict) -> BookCopy:
    copy = await get_or_404(db, BookCopy, copy_id)

    new_status = changes.get("status")
    if new_status is not None and new_status != copy.status:
        open_loan = await db.scalar(
            select(Loan.loan_id).where(
                Loan.copy_id == copy_id,
                Loan.return_date.is_(None),
            ),
        )
        # Статус виданого примірника змінює лише повернення
        if open_loan is not None:
            raise InvalidStateTransition(
                "BookCopy",
                copy.status,
                new_status,
                message=f"Copy {copy_id} is on loan {open_loan}; return it first",
            )

    return await update_entity(db, copy, changes)
