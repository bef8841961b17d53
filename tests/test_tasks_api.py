import pytest

API = "/api/v1"


async def create_user(client, username, **overrides):
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": "s3cret-pass",
        **overrides,
    }
    response = await client.post(f"{API}/users", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_project(client, owner_id, name="Website Redesign"):
    response = await client.post(f"{API}/projects", json={"name": name, "owner_id": owner_id})
    assert response.status_code == 201, response.text
    return response.json()


async def create_task(client, created_by, **fields):
    response = await client.post(
        f"{API}/tasks",
        json={"title": "Design Homepage", "created_by": created_by, **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_root_greets(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Task Management API"}


async def test_user_password_is_never_returned(client):
    user = await create_user(client, "john_doe")

    assert user["role"] == "user"
    assert "password" not in user
    assert "password_hash" not in user

    response = await client.get(f"{API}/users/{user['user_id']}")
    assert response.json()["username"] == "john_doe"


async def test_duplicate_username_conflicts(client):
    await create_user(client, "jane_smith")

    response = await client.post(
        f"{API}/users",
        json={"username": "jane_smith", "email": "other@example.com", "password": "s3cret-pass"},
    )

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "unique"
    assert detail["field"] == "username"


async def test_duplicate_email_conflicts(client):
    await create_user(client, "jane_smith")

    response = await client.post(
        f"{API}/users",
        json={"username": "jane_s", "email": "JANE_SMITH@example.com", "password": "s3cret-pass"},
    )

    assert response.status_code == 409
    assert response.json()["detail"]["field"] == "email"


async def test_project_with_unknown_owner_is_not_found(client):
    response = await client.post(f"{API}/projects", json={"name": "Ghost", "owner_id": 999})

    assert response.status_code == 404
    assert response.json()["detail"]["entity"] == "Owner"


async def test_task_defaults(client):
    admin = await create_user(client, "admin")
    project = await create_project(client, admin["user_id"])

    task = await create_task(client, admin["user_id"], project_id=project["project_id"])

    assert task["status"] == "todo"
    assert task["priority"] == "medium"
    assert task["assigned_to"] is None


@pytest.mark.parametrize("method", ["PUT", "PATCH"])
async def test_update_touches_only_supplied_fields(client, method):
    admin = await create_user(client, "admin")
    john = await create_user(client, "john_doe")
    task = await create_task(
        client,
        admin["user_id"],
        assigned_to=john["user_id"],
        priority="high",
        description="Create mockups",
    )

    response = await client.request(
        method,
        f"{API}/tasks/{task['task_id']}",
        json={"status": "in_progress"},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "in_progress"
    assert updated["priority"] == "high"
    assert updated["description"] == "Create mockups"
    assert updated["assigned_to"] == john["user_id"]


async def test_empty_update_changes_nothing(client):
    admin = await create_user(client, "admin")
    task = await create_task(client, admin["user_id"])

    response = await client.patch(f"{API}/tasks/{task['task_id']}", json={})

    assert response.status_code == 200
    assert response.json() == task


async def test_update_with_unknown_assignee_is_not_found(client):
    admin = await create_user(client, "admin")
    task = await create_task(client, admin["user_id"])

    response = await client.patch(f"{API}/tasks/{task['task_id']}", json={"assigned_to": 404})

    assert response.status_code == 404
    assert response.json()["detail"]["entity"] == "Assignee"


async def test_invalid_status_is_a_validation_error(client):
    admin = await create_user(client, "admin")
    task = await create_task(client, admin["user_id"])

    response = await client.patch(f"{API}/tasks/{task['task_id']}", json={"status": "finished"})

    assert response.status_code == 422


async def test_missing_task_is_not_found(client):
    assert (await client.get(f"{API}/tasks/12345")).status_code == 404
    assert (await client.delete(f"{API}/tasks/12345")).status_code == 404


async def test_task_filters(client):
    admin = await create_user(client, "admin")
    john = await create_user(client, "john_doe")
    website = await create_project(client, admin["user_id"])
    mobile = await create_project(client, john["user_id"], name="Mobile App")
    first = await create_task(client, admin["user_id"], project_id=website["project_id"], assigned_to=john["user_id"])
    await create_task(client, admin["user_id"], project_id=mobile["project_id"], assigned_to=john["user_id"], status="done")
    await create_task(client, admin["user_id"], project_id=website["project_id"])

    by_project = await client.get(f"{API}/tasks", params={"project_id": website["project_id"]})
    by_both = await client.get(
        f"{API}/tasks",
        params={"assigned_to": john["user_id"], "status": "todo"},
    )

    assert len(by_project.json()) == 2
    assert [task["task_id"] for task in by_both.json()] == [first["task_id"]]


async def test_deleting_project_unlinks_its_tasks(client):
    admin = await create_user(client, "admin")
    project = await create_project(client, admin["user_id"])
    task = await create_task(client, admin["user_id"], project_id=project["project_id"])

    response = await client.delete(f"{API}/projects/{project['project_id']}")

    assert response.status_code == 204
    assert response.content == b""
    task = (await client.get(f"{API}/tasks/{task['task_id']}")).json()
    assert task["project_id"] is None


async def test_deleting_user_cascades_owned_work(client):
    admin = await create_user(client, "admin")
    john = await create_user(client, "john_doe")
    project = await create_project(client, john["user_id"])
    created = await create_task(client, john["user_id"])
    assigned = await create_task(client, admin["user_id"], assigned_to=john["user_id"])

    response = await client.delete(f"{API}/users/{john['user_id']}")

    assert response.status_code == 204
    assert (await client.get(f"{API}/projects/{project['project_id']}")).status_code == 404
    assert (await client.get(f"{API}/tasks/{created['task_id']}")).status_code == 404
    survivor = (await client.get(f"{API}/tasks/{assigned['task_id']}")).json()
    assert survivor["assigned_to"] is None
