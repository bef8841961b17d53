from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.exceptions.pagination import paginate_response
from librarium.models.book import Book
from librarium.models.book_copy import BookCopy, CopyStatus
from librarium.schemas.library import (
    BookAuthorLink,
    BookCopyCreate,
    BookCopyResponse,
    BookCopyUpdate,
    BookCreate,
    BookResponse,
    BookUpdate,
)
from librarium.services.catalog_service import (
    add_copy,
    create_book,
    get_book,
    link_author,
    link_category,
    list_copies,
    unlink_author,
    unlink_category,
    update_book,
    update_copy,
)
from librarium.services.crud_service import delete_entity, get_or_404, list_entities

router = APIRouter(prefix="/library", tags=["Library Books"])


@router.post("/books", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def add_book(book_data: BookCreate, db: AsyncSession = Depends(get_db)):
    """Книга разом з авторами та категоріями створюється однією транзакцією."""
    return await create_book(db, book_data)


@router.get("/books", response_model=dict)
async def list_books(
    db: AsyncSession = Depends(get_db),
    publisher_id: Optional[int] = Query(None),
    title: Optional[str] = Query(None),
    page: int = Query(1, ge=1, description="Номер сторінки (починається з 1)"),
    per_page: int = Query(50, ge=1, le=100),
):
    filters = []
    if publisher_id is not None:
        filters.append(Book.publisher_id == publisher_id)
    if title:
        filters.append(Book.title.ilike(f"%{title}%"))

    total, books = await list_entities(db, Book, page, per_page, filters)
    return paginate_response(
        total,
        page,
        per_page,
        [BookResponse.model_validate(b).model_dump(by_alias=True) for b in books],
    )


@router.get("/books/{book_id}", response_model=BookResponse)
async def read_book(book_id: int, db: AsyncSession = Depends(get_db)):
    return await get_book(db, book_id)


@router.patch("/books/{book_id}", response_model=BookResponse)
async def change_book(
    book_id: int,
    book_data: BookUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await update_book(db, book_id, book_data.model_dump(exclude_unset=True))


@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: int, db: AsyncSession = Depends(get_db)):
    """Примірники, зв'язки з авторами і категоріями зникають разом з книгою."""
    await delete_entity(db, Book, book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/books/{book_id}/authors", response_model=BookResponse)
async def add_book_author(
    book_id: int,
    link: BookAuthorLink,
    db: AsyncSession = Depends(get_db),
):
    return await link_author(db, book_id, link.author_id, link.role)


@router.delete("/books/{book_id}/authors/{author_id}", response_model=BookResponse)
async def remove_book_author(
    book_id: int,
    author_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await unlink_author(db, book_id, author_id)


@router.post("/books/{book_id}/categories/{category_id}", response_model=BookResponse)
async def add_book_category(
    book_id: int,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await link_category(db, book_id, category_id)


@router.delete("/books/{book_id}/categories/{category_id}", response_model=BookResponse)
async def remove_book_category(
    book_id: int,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await unlink_category(db, book_id, category_id)


# Physical copies
@router.post(
    "/books/{book_id}/copies",
    response_model=BookCopyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_copy(
    book_id: int,
    copy_data: BookCopyCreate,
    db: AsyncSession = Depends(get_db),
):
    return await add_copy(db, book_id, copy_data)


@router.get("/books/{book_id}/copies", response_model=List[BookCopyResponse])
async def get_book_copies(
    book_id: int,
    db: AsyncSession = Depends(get_db),
    status: Optional[CopyStatus] = Query(None),
):
    return await list_copies(db, book_id, status)


@router.get("/copies/{copy_id}", response_model=BookCopyResponse)
async def read_copy(copy_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, BookCopy, copy_id)


@router.patch("/copies/{copy_id}", response_model=BookCopyResponse)
async def change_copy(
    copy_id: int,
    copy_data: BookCopyUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await update_copy(db, copy_id, copy_data.model_dump(exclude_unset=True))


@router.delete("/copies/{copy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_copy(copy_id: int, db: AsyncSession = Depends(get_db)):
    await delete_entity(db, BookCopy, copy_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
