from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import get_db
from librarium.exceptions.pagination import paginate_response
from librarium.models.author import Author
from librarium.models.category import Category
from librarium.models.publisher import Publisher
from librarium.schemas.library import (
    AuthorCreate,
    AuthorResponse,
    AuthorUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    PublisherCreate,
    PublisherResponse,
    PublisherUpdate,
)
from librarium.services.catalog_service import create_category, update_category
from librarium.services.crud_service import (
    create_entity,
    delete_entity,
    get_or_404,
    list_entities,
    update_entity,
)

router = APIRouter(prefix="/library", tags=["Library Catalog"])


# Authors
@router.post("/authors", response_model=AuthorResponse, status_code=status.HTTP_201_CREATED)
async def create_author(author_data: AuthorCreate, db: AsyncSession = Depends(get_db)):
    return await create_entity(db, Author, author_data.model_dump(exclude_none=True))


@router.get("/authors", response_model=dict)
async def list_authors(
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
):
    total, authors = await list_entities(db, Author, page, per_page)
    return paginate_response(
        total,
        page,
        per_page,
        [AuthorResponse.model_validate(a) for a in authors],
    )


@router.get("/authors/{author_id}", response_model=AuthorResponse)
async def read_author(author_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Author, author_id)


@router.patch("/authors/{author_id}", response_model=AuthorResponse)
async def update_author(
    author_id: int,
    author_data: AuthorUpdate,
    db: AsyncSession = Depends(get_db),
):
    author = await get_or_404(db, Author, author_id)
    return await update_entity(db, author, author_data.model_dump(exclude_unset=True))


@router.delete("/authors/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_author(author_id: int, db: AsyncSession = Depends(get_db)):
    await delete_entity(db, Author, author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Publishers
@router.post(
    "/publishers",
    response_model=PublisherResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_publisher(
    publisher_data: PublisherCreate,
    db: AsyncSession = Depends(get_db),
):
    return await create_entity(db, Publisher, publisher_data.model_dump(exclude_none=True))


@router.get("/publishers", response_model=dict)
async def list_publishers(
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
):
    total, publishers = await list_entities(db, Publisher, page, per_page)
    return paginate_response(
        total,
        page,
        per_page,
        [PublisherResponse.model_validate(p) for p in publishers],
    )


@router.get("/publishers/{publisher_id}", response_model=PublisherResponse)
async def read_publisher(publisher_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Publisher, publisher_id)


@router.patch("/publishers/{publisher_id}", response_model=PublisherResponse)
async def update_publisher(
    publisher_id: int,
    publisher_data: PublisherUpdate,
    db: AsyncSession = Depends(get_db),
):
    publisher = await get_or_404(db, Publisher, publisher_id)
    return await update_entity(
        db,
        publisher,
        publisher_data.model_dump(exclude_unset=True),
    )


@router.delete("/publishers/{publisher_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_publisher(publisher_id: int, db: AsyncSession = Depends(get_db)):
    """Книги видавця лишаються, їхній publisher_id стає NULL."""
    await delete_entity(db, Publisher, publisher_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Categories
@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_category(category_data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await create_category(db, category_data.model_dump(exclude_none=True))


@router.get("/categories", response_model=dict)
async def list_categories(
    db: AsyncSession = Depends(get_db),
    parent_category_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
):
    filters = []
    if parent_category_id is not None:
        filters.append(Category.parent_category_id == parent_category_id)

    total, categories = await list_entities(db, Category, page, per_page, filters)
    return paginate_response(
        total,
        page,
        per_page,
        [CategoryResponse.model_validate(c) for c in categories],
    )


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def read_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Category, category_id)


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def change_category(
    category_id: int,
    category_data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Зміна батьківської категорії перевіряється на цикли."""
    return await update_category(
        db,
        category_id,
        category_data.model_dump(exclude_unset=True),
    )


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    await delete_entity(db, Category, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
