import pytest

from librarium.exceptions.errors import CheckViolation, ForeignKeyViolation
from librarium.models import Category, Staff, StaffRole
from librarium.services import hierarchy
from librarium.services.catalog_service import create_category, update_category
from librarium.services.member_service import create_staff, update_staff


async def test_category_tree_accepts_new_leaves(db):
    root = await create_category(db, {"name": "Fiction"})
    child = await create_category(db, {"name": "Fantasy", "parent_category_id": root.category_id})

    assert child.parent_category_id == root.category_id


async def test_category_cannot_become_its_own_ancestor(db):
    root = await create_category(db, {"name": "Fiction"})
    child = await create_category(db, {"name": "Fantasy", "parent_category_id": root.category_id})
    grandchild = await create_category(db, {"name": "High Fantasy", "parent_category_id": child.category_id})

    with pytest.raises(CheckViolation) as exc_info:
        await update_category(db, root.category_id, {"parent_category_id": grandchild.category_id})

    assert exc_info.value.field == "parent_category_id"
    assert exc_info.value.constraint == "acyclic"

    with pytest.raises(CheckViolation):
        await update_category(db, root.category_id, {"parent_category_id": root.category_id})

    root = await db.get(Category, root.category_id)
    assert root.parent_category_id is None


async def test_missing_parent_category_is_rejected(db):
    with pytest.raises(ForeignKeyViolation) as exc_info:
        await create_category(db, {"name": "Orphan", "parent_category_id": 77})

    assert exc_info.value.field == "parent_category_id"


async def test_moving_a_category_within_the_tree(db):
    fiction = await create_category(db, {"name": "Fiction"})
    poetry = await create_category(db, {"name": "Poetry"})
    sonnets = await create_category(db, {"name": "Sonnets", "parent_category_id": fiction.category_id})

    sonnets = await update_category(db, sonnets.category_id, {"parent_category_id": poetry.category_id})

    assert sonnets.parent_category_id == poetry.category_id


def staff_data(name, supervisor_id=None):
    return {
        "first_name": name,
        "last_name": "Clerk",
        "email": f"{name.lower()}@library.org",
        "role": StaffRole.ASSISTANT,
        "supervisor_id": supervisor_id,
    }


async def test_supervisor_chain_cannot_loop(db):
    head = await create_staff(db, staff_data("Head"))
    deputy = await create_staff(db, staff_data("Deputy", head.staff_id))

    with pytest.raises(CheckViolation) as exc_info:
        await update_staff(db, head.staff_id, {"supervisor_id": deputy.staff_id})

    assert exc_info.value.field == "supervisor_id"

    head = await update_staff(db, head.staff_id, {"supervisor_id": None})
    assert head.supervisor_id is None


async def test_too_deep_hierarchy_is_rejected(db, monkeypatch):
    monkeypatch.setattr(hierarchy, "MAX_HIERARCHY_DEPTH", 3)
    parent_id = None
    for n in range(4):
        staff = await create_staff(db, staff_data(f"Level{n}", parent_id))
        parent_id = staff.staff_id

    with pytest.raises(CheckViolation) as exc_info:
        await create_staff(db, staff_data("Level4", parent_id))

    assert exc_info.value.constraint == "max_depth"
    assert await db.get(Staff, parent_id) is not None
