"""Create/read/update/delete helpers shared by the library routers.

Every write runs inside ``atomic`` so a failed statement leaves nothing
behind, and engine integrity errors surface as ConstraintViolation.
"""

from typing import Any, Dict, Iterable, Optional, Type

from sqlalchemy import delete, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import Base, atomic
from librarium.exceptions.errors import ForeignKeyViolation, NotFound
from librarium.exceptions.pagination import page_offset


def primary_key_of(model: Type[Base]):
    return inspect(model).primary_key[0]


def entity_label(model: Type[Base]) -> str:
    return model.__name__


async def get_or_404(
    db: AsyncSession,
    model: Type[Base],
    pk: Any,
    label: Optional[str] = None,
):
    instance = await db.get(model, pk)
    if instance is None:
        raise NotFound(label or entity_label(model), pk)
    return instance


async def ensure_references(db: AsyncSession, references: Dict[str, tuple]):
    """Reject a write whose foreign keys point at missing rows.

    ``references`` maps a field name to ``(model, value)``; ``None`` values
    are skipped because every optional reference is nullable.
    """
    for field, (model, value) in references.items():
        if value is None:
            continue
        if await db.get(model, value) is None:
            raise ForeignKeyViolation(
                field,
                message=f"{entity_label(model)} {value} referenced by {field} does not exist",
            )


async def list_entities(
    db: AsyncSession,
    model: Type[Base],
    page: int = 1,
    per_page: int = 50,
    filters: Iterable = (),
):
    query = select(model).where(*filters)
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(
        query.order_by(primary_key_of(model))
        .limit(per_page)
        .offset(page_offset(page, per_page)),
    )
    return total, result.scalars().all()


async def create_entity(db: AsyncSession, model: Type[Base], data: dict):
    instance = model(**data)
    async with atomic(db):
        db.add(instance)
    await db.refresh(instance)
    return instance


async def update_entity(db: AsyncSession, instance: Base, changes: dict):
    if not changes:
        return instance

    async with atomic(db):
        for key, value in changes.items():
            setattr(instance, key, value)
    await db.refresh(instance)
    return instance


async def delete_entity(db: AsyncSession, model: Type[Base], pk: Any):
    """Physical delete; dependents follow the declared ON DELETE action."""
    await get_or_404(db, model, pk)

    async with atomic(db):
        await db.execute(delete(model).where(primary_key_of(model) == pk))

    # Рядки-нащадки змінила сама БД, тож кеш сесії вже неактуальний
    db.expunge_all()
