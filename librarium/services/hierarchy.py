from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from librarium.dependencies.database import Base
from librarium.exceptions.errors import CheckViolation, ForeignKeyViolation

MAX_HIERARCHY_DEPTH = 64


async def ensure_acyclic(
    db: AsyncSession,
    model: Type[Base],
    node_id: Optional[int],
    new_parent_id: Optional[int],
):
    """Walk the parent chain from ``new_parent_id`` towards the root.

    Raises CheckViolation when the walk reaches ``node_id`` (the new edge
    would close a cycle), revisits a node, or runs deeper than
    MAX_HIERARCHY_DEPTH. A missing parent is a ForeignKeyViolation.
    """
    field = model.parent_column
    if new_parent_id is None:
        return

    if await db.get(model, new_parent_id) is None:
        raise ForeignKeyViolation(
            field,
            message=f"{model.__name__} {new_parent_id} referenced by {field} does not exist",
        )

    seen = set()
    current_id = new_parent_id
    while current_id is not None:
        if current_id == node_id or current_id in seen:
            raise CheckViolation(
                field,
                constraint="acyclic",
                message=f"{model.__name__} {node_id} cannot become its own ancestor",
            )
        if len(seen) >= MAX_HIERARCHY_DEPTH:
            raise CheckViolation(
                field,
                constraint="max_depth",
                message=f"{model.__name__} hierarchy is deeper than {MAX_HIERARCHY_DEPTH}",
            )
        seen.add(current_id)
        node = await db.get(model, current_id)
        current_id = getattr(node, field) if node is not None else None
