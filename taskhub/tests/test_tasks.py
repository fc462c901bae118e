"""
Test cases for the per-user task routes.
"""
import pytest
from httpx import ASGITransport, AsyncClient


async def register(ac, email):
    response = await ac.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "pw123", "passwordConfirmation": "pw123"},
    )
    data = response.json()["data"]
    return data["userId"], {"Authorization": f"Bearer {data['jwtToken']}"}


@pytest.mark.asyncio
async def test_task_lifecycle(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        user_id, headers = await register(ac, "a@b.com")
        base = f"/api/v1/users/{user_id}/tasks"

        created = await ac.post(base, headers=headers, json={"name": "groceries", "description": "milk"})
        assert created.status_code == 201
        task = created.json()["data"]
        assert task["name"] == "groceries"
        assert task["description"] == "milk"
        assert task["userId"] == user_id
        task_id = task["taskId"]

        fetched = await ac.get(f"{base}/{task_id}", headers=headers)
        assert fetched.status_code == 200
        assert fetched.json()["data"] == task

        updated = await ac.put(f"{base}/{task_id}", headers=headers, json={"name": "shopping", "description": "bread"})
        assert updated.status_code == 200
        assert updated.json()["data"]["name"] == "shopping"

        await ac.post(base, headers=headers, json={"name": "laundry", "description": "whites"})
        listed = await ac.get(base, headers=headers)
        assert [t["name"] for t in listed.json()["data"]] == ["shopping", "laundry"]

        deleted = await ac.delete(f"{base}/{task_id}", headers=headers)
        assert deleted.status_code == 204

        missing = await ac.get(f"{base}/{task_id}", headers=headers)
        assert missing.status_code == 404
        assert missing.json()["error"].startswith("TaskNotFoundError")


@pytest.mark.asyncio
async def test_empty_task_list(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        user_id, headers = await register(ac, "a@b.com")
        response = await ac.get(f"/api/v1/users/{user_id}/tasks", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_duplicate_task_name(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        user_id, headers = await register(ac, "a@b.com")
        other_id, other_headers = await register(ac, "c@d.com")
        payload = {"name": "groceries", "description": "milk"}

        await ac.post(f"/api/v1/users/{user_id}/tasks", headers=headers, json=payload)
        duplicate = await ac.post(f"/api/v1/users/{user_id}/tasks", headers=headers, json=payload)
        assert duplicate.status_code == 409
        assert "task already exists for user" in duplicate.json()["error"].lower()

        # Names are only unique per owner
        other = await ac.post(f"/api/v1/users/{other_id}/tasks", headers=other_headers, json=payload)
        assert other.status_code == 201


@pytest.mark.asyncio
async def test_rename_onto_existing_name(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        user_id, headers = await register(ac, "a@b.com")
        base = f"/api/v1/users/{user_id}/tasks"
        await ac.post(base, headers=headers, json={"name": "one", "description": "d"})
        second = await ac.post(base, headers=headers, json={"name": "two", "description": "d"})

        response = await ac.put(
            f"{base}/{second.json()['data']['taskId']}", headers=headers, json={"name": "one", "description": "d"},
        )
        assert response.status_code == 409


@pytest.mark.asyncio
async def test_task_payload_validation(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        user_id, headers = await register(ac, "a@b.com")
        response = await ac.post(f"/api/v1/users/{user_id}/tasks", headers=headers, json={"name": "n"})
        assert response.status_code == 400
        assert response.json()["error"] == "IllegalArgumentError: Task description cannot be empty"


@pytest.mark.asyncio
async def test_cannot_touch_other_users_tasks(app, store):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        owner_id, owner_headers = await register(ac, "a@b.com")
        intruder_id, intruder_headers = await register(ac, "c@d.com")
        created = await ac.post(f"/api/v1/users/{owner_id}/tasks", headers=owner_headers,
                                json={"name": "secret", "description": "plans"})
        task_id = created.json()["data"]["taskId"]

        # Through the owner's path: the path user is not the caller
        via_owner = await ac.delete(f"/api/v1/users/{owner_id}/tasks/{task_id}", headers=intruder_headers)
        assert via_owner.status_code == 403

        # Through the intruder's own path: the task belongs to someone else
        via_self = await ac.delete(f"/api/v1/users/{intruder_id}/tasks/{task_id}", headers=intruder_headers)
        assert via_self.status_code == 403
        assert via_self.json()["error"] == "AccessDeniedError: Task does not belong to the user"

        hidden = await ac.get(f"/api/v1/users/{intruder_id}/tasks/{task_id}", headers=intruder_headers)
        assert hidden.status_code == 404

    assert task_id in store.tasks


@pytest.mark.asyncio
async def test_tasks_require_authentication(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        response = await ac.get("/api/v1/users/1/tasks")
        assert response.status_code == 401
