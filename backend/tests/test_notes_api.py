"""
iNote Backend - Notes API Tests
===============================

What:  End-to-end tests for /inote/notes through the real app wiring.
How:   HTTPX AsyncClient over ASGITransport; SQLite test database.
"""

from datetime import timedelta

import pytest

from inote.database import utcnow

NOTES = "/inote/notes"


async def _create(client, title="Hello", content="World", **extra):
    response = await client.post(NOTES, json={"title": title, "content": content, **extra})
    assert response.status_code == 200
    return response.json()


class TestNoteLifecycle:

    @pytest.mark.asyncio
    async def test_create_get_delete(self, test_client):
        created = await _create(test_client)
        assert created["id"] == 1
        assert created["title"] == "Hello"
        assert created["user_id"] is None

        response = await test_client.get(f"{NOTES}/1")
        assert response.status_code == 200
        assert response.json() == created

        response = await test_client.delete(f"{NOTES}/1")
        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get(f"{NOTES}/1")
        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_list_empty_is_ok(self, test_client):
        response = await test_client.get(NOTES)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_reflects_writes(self, test_client):
        await _create(test_client, "one")
        assert len((await test_client.get(NOTES)).json()) == 1

        await _create(test_client, "two")
        titles = [n["title"] for n in (await test_client.get(NOTES)).json()]
        assert titles == ["one", "two"]

    @pytest.mark.asyncio
    async def test_update(self, test_client):
        created = await _create(test_client, "Draft", "v1")

        response = await test_client.put(
            f"{NOTES}/{created['id']}", json={"title": "Final", "content": "v2"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["title"] == "Final"
        assert body["created_at"] == created["created_at"]
        assert (await test_client.get(f"{NOTES}/{created['id']}")).json()["content"] == "v2"

    @pytest.mark.asyncio
    async def test_update_and_delete_missing(self, test_client):
        response = await test_client.put(f"{NOTES}/9", json={"title": "t", "content": "c"})
        assert response.status_code == 404
        assert response.content == b""
        assert (await test_client.delete(f"{NOTES}/9")).status_code == 404

    @pytest.mark.asyncio
    async def test_create_rejects_blank_title(self, test_client):
        response = await test_client.post(NOTES, json={"title": "", "content": "c"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_with_empty_content(self, test_client):
        created = await _create(test_client, "Blank", "")
        assert created["content"] == ""

        response = await test_client.put(
            f"{NOTES}/{created['id']}", json={"title": "Blank", "content": ""}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_create_with_unknown_owner(self, test_client):
        response = await test_client.post(
            NOTES, json={"title": "t", "content": "c", "user_id": 12}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestNoteLookups:

    @pytest.mark.asyncio
    async def test_title_is_exact(self, test_client):
        await _create(test_client, "Groceries")
        await _create(test_client, "Groceries 2")

        response = await test_client.get(f"{NOTES}/title/Groceries")
        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["Groceries"]

        response = await test_client.get(f"{NOTES}/title/groceries")
        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_by_user(self, test_client):
        owner = (await test_client.post(
            "/inote/users",
            json={"username": "ann", "email": "ann@example.com", "password": "pw"},
        )).json()
        note = await _create(test_client, user_id=owner["id"])

        response = await test_client.get(f"{NOTES}/user/{owner['id']}")
        assert response.status_code == 200
        assert [n["id"] for n in response.json()] == [note["id"]]

        assert (await test_client.get(f"{NOTES}/user/999")).status_code == 404

    @pytest.mark.asyncio
    async def test_created_between_includes_whole_days(self, test_client):
        await _create(test_client)
        today = utcnow().date()

        response = await test_client.get(
            f"{NOTES}/created-between",
            params={"startDate": today.isoformat(), "endDate": today.isoformat()},
        )
        assert response.status_code == 200
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_created_between_empty_range(self, test_client):
        await _create(test_client)
        long_ago = utcnow().date() - timedelta(days=400)

        response = await test_client.get(
            f"{NOTES}/created-between",
            params={"startDate": long_ago.isoformat(), "endDate": long_ago.isoformat()},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_created_between_bad_date(self, test_client):
        response = await test_client.get(
            f"{NOTES}/created-between",
            params={"startDate": "2024-13-01", "endDate": "2024-12-31"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "startDate"

    @pytest.mark.asyncio
    async def test_created_between_inverted_range(self, test_client):
        response = await test_client.get(
            f"{NOTES}/created-between",
            params={"startDate": "2024-12-31", "endDate": "2024-01-01"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start", ["20000101", "2000-01-01T00:00:00", "2000/01/01"])
    async def test_created_between_requires_plain_dates(self, test_client, start):
        response = await test_client.get(
            f"{NOTES}/created-between",
            params={"startDate": start, "endDate": "2999-01-01"},
        )
        assert response.status_code == 400
        assert response.json()["details"]["field"] == "startDate"


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get(NOTES, headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get(NOTES)
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert set(body["cache"]) == {"notes", "users"}
