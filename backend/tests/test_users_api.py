"""
iNote Backend - Users API Tests
===============================

What:  End-to-end tests for /inote/users through the real app wiring.
"""

import pytest

USERS = "/inote/users"


async def _register(client, username, role=None):
    payload = {"username": username, "email": f"{username}@example.com", "password": "secret"}
    if role is not None:
        payload["role"] = role
    response = await client.post(USERS, json=payload)
    assert response.status_code == 200
    return response.json()


class TestUserLifecycle:

    @pytest.mark.asyncio
    async def test_register_get_delete(self, test_client):
        created = await _register(test_client, "ann")
        assert created["id"] == 1
        assert created["role"] == "USER"
        assert "password" not in created

        response = await test_client.get(f"{USERS}/1")
        assert response.status_code == 200
        assert response.json()["username"] == "ann"

        assert (await test_client.delete(f"{USERS}/1")).status_code == 204
        response = await test_client.get(f"{USERS}/1")
        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_list_empty_is_ok(self, test_client):
        response = await test_client.get(USERS)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_update(self, test_client):
        created = await _register(test_client, "ann")

        response = await test_client.put(
            f"{USERS}/{created['id']}",
            json={"username": "anne", "email": "anne@example.com", "password": "new", "role": "ADMIN"},
        )

        assert response.status_code == 200
        assert response.json()["username"] == "anne"
        assert response.json()["role"] == "ADMIN"
        assert "password" not in response.json()

    @pytest.mark.asyncio
    async def test_update_missing(self, test_client):
        response = await test_client.put(
            f"{USERS}/3",
            json={"username": "x", "email": "x@example.com", "password": "pw"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_is_conflict(self, test_client):
        await _register(test_client, "ann")

        response = await test_client.post(
            USERS, json={"username": "ann", "email": "second@example.com", "password": "pw"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_delete_owner_of_notes_is_conflict(self, test_client):
        ann = await _register(test_client, "ann")
        await test_client.post(
            "/inote/notes", json={"title": "t", "content": "c", "user_id": ann["id"]}
        )

        response = await test_client.delete(f"{USERS}/{ann['id']}")

        assert response.status_code == 409
        assert (await test_client.get(f"{USERS}/{ann['id']}")).status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, test_client):
        response = await test_client.post(
            USERS, json={"username": "ann", "email": "not-an-email", "password": "pw"}
        )
        assert response.status_code == 422


class TestUserSearch:

    @pytest.mark.asyncio
    async def test_by_username(self, test_client):
        await _register(test_client, "ann")

        response = await test_client.get(f"{USERS}/search/username/ann")
        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["ann"]

        assert (await test_client.get(f"{USERS}/search/username/bob")).status_code == 404

    @pytest.mark.asyncio
    async def test_by_email(self, test_client):
        ann = await _register(test_client, "ann")

        response = await test_client.get(f"{USERS}/search/email/ann@example.com")
        assert response.status_code == 200
        assert response.json()["id"] == ann["id"]

        response = await test_client.get(f"{USERS}/search/email/bob@example.com")
        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_by_role_is_case_insensitive(self, test_client):
        await _register(test_client, "ann", role="ADMIN")
        await _register(test_client, "bob")

        response = await test_client.get(f"{USERS}/search/role/admin")

        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["ann"]

    @pytest.mark.asyncio
    async def test_by_role_without_members(self, test_client):
        await _register(test_client, "bob")
        assert (await test_client.get(f"{USERS}/search/role/ADMIN")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_role_is_bad_request(self, test_client):
        response = await test_client.get(f"{USERS}/search/role/bogus")

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "role"

    @pytest.mark.asyncio
    async def test_created_after(self, test_client):
        await _register(test_client, "ann")

        response = await test_client.get(f"{USERS}/search/createdAfter/2000-01-01T00:00:00")
        assert response.status_code == 200
        assert len(response.json()) == 1

        response = await test_client.get(f"{USERS}/search/createdAfter/2999-01-01T00:00:00")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_created_after_accepts_offset(self, test_client):
        await _register(test_client, "ann")
        response = await test_client.get(
            f"{USERS}/search/createdAfter/2000-01-01T00:00:00+02:00"
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_created_after_bad_date(self, test_client):
        response = await test_client.get(f"{USERS}/search/createdAfter/yesterday")
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["2000-01-01", "20000101T000000", "2000-01-01 00:00:00"])
    async def test_created_after_requires_extended_date_time(self, test_client, value):
        await _register(test_client, "ann")

        response = await test_client.get(f"{USERS}/search/createdAfter/{value}")

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "date"

    @pytest.mark.asyncio
    async def test_created_after_accepts_minutes_and_fraction(self, test_client):
        await _register(test_client, "ann")
        for value in ("2000-01-01T00:00", "2000-01-01T00:00:00.250"):
            response = await test_client.get(f"{USERS}/search/createdAfter/{value}")
            assert response.status_code == 200
