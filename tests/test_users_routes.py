"""
Journal API: /users Endpoint Tests
==================================

What:  Signup, signin, listing and account deletion over HTTP, against the
       in-memory SQLite app from conftest.
"""

import pytest


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_returns_plain_text_token(self, client, credential_service):
        response = await client.post("/users/signup", json={"username": "dean", "password": "pw"})

        assert response.status_code == 201
        assert response.headers["content-type"].startswith("text/plain")
        assert credential_service.verify_token(response.text).username == "dean"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, client, signup):
        await signup("dean")
        response = await client.post("/users/signup", json={"username": "dean", "password": "other"})

        assert response.status_code == 409
        assert response.json() == {"code": 409, "msg": "Username already exists", "details": None}

    @pytest.mark.asyncio
    async def test_username_is_trimmed(self, client, signup):
        await signup("  dean  ")
        response = await client.get("/users")
        assert response.json() == ["dean"]

    @pytest.mark.asyncio
    async def test_missing_password_is_malformed(self, client):
        response = await client.post("/users/signup", json={"username": "dean"})

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 400
        assert body["msg"] == "Malformed request"
        assert {"location": "body", "param": "password"}.items() <= body["details"][0].items()

    @pytest.mark.asyncio
    async def test_blank_username_is_malformed(self, client):
        response = await client.post("/users/signup", json={"username": "   ", "password": "pw"})

        assert response.status_code == 400
        assert response.json()["details"][0]["param"] == "username"

    @pytest.mark.asyncio
    async def test_overlong_username_is_malformed(self, client):
        response = await client.post("/users/signup", json={"username": "u" * 256, "password": "pw"})

        assert response.status_code == 400
        assert response.json()["details"][0]["param"] == "username"
        assert (await client.get("/users")).json() == []

    @pytest.mark.asyncio
    async def test_username_at_limit_accepted(self, client, signup):
        await signup("u" * 255)
        assert (await client.get("/users")).json() == ["u" * 255]

    @pytest.mark.asyncio
    async def test_numeric_password_is_not_coerced(self, client):
        response = await client.post("/users/signup", json={"username": "dean", "password": 1234})
        assert response.status_code == 400


class TestSignin:
    @pytest.mark.asyncio
    async def test_signin(self, client, signup, credential_service):
        await signup("dean", "secret")
        response = await client.post("/users/signin", json={"username": "dean", "password": "secret"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert credential_service.verify_token(response.text).username == "dean"

    @pytest.mark.asyncio
    async def test_unknown_user(self, client):
        response = await client.post("/users/signin", json={"username": "nobody", "password": "x"})

        assert response.status_code == 404
        assert response.json()["msg"] == "User not found"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client, signup):
        await signup("dean", "secret")
        response = await client.post("/users/signin", json={"username": "dean", "password": "nope"})

        assert response.status_code == 403
        assert response.json()["msg"] == "Incorrect password"


class TestListUsers:
    @pytest.mark.asyncio
    async def test_empty(self, client):
        response = await client.get("/users")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_lists_usernames_only(self, client, signup):
        await signup("dean1")
        await signup("dean2")

        response = await client.get("/users")

        assert sorted(response.json()) == ["dean1", "dean2"]


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_delete_self_removes_account_and_entries(self, client, signup):
        token = await signup("dean")
        old_ids = []
        for title in ("a", "b"):
            created = await client.post(
                "/entries", json={"title": title, "content": ""}, headers=bearer(token)
            )
            assert created.status_code == 201
            old_ids.append(created.json()["id"])

        response = await client.delete("/users", params={"username": "dean"}, headers=bearer(token))

        assert response.status_code == 204
        assert response.content == b""
        assert (await client.get("/users")).json() == []

        # Re-registering the name starts from an empty journal.
        fresh = await signup("dean")
        index = await client.get("/entries", headers=bearer(fresh))
        assert index.json()["count"] == 0

        for entry_id in old_ids:
            old = await client.get(f"/entries/{entry_id}", headers=bearer(fresh))
            assert old.status_code == 404
            assert old.json()["msg"] == "Entry does not exist"

    @pytest.mark.asyncio
    async def test_old_token_after_delete_is_expired_user(self, client, signup):
        token = await signup("dean")
        await client.delete("/users", params={"username": "dean"}, headers=bearer(token))

        response = await client.get("/entries", headers=bearer(token))

        assert response.status_code == 400
        assert response.json()["msg"] == "Current user does not exist"

    @pytest.mark.asyncio
    async def test_delete_twice(self, client, signup):
        token = await signup("dean")
        await client.delete("/users", params={"username": "dean"}, headers=bearer(token))

        response = await client.delete("/users", params={"username": "dean"}, headers=bearer(token))

        assert response.status_code == 400
        assert response.json()["msg"] == "Current user does not exist"

    @pytest.mark.asyncio
    async def test_cannot_delete_other_user(self, client, signup):
        token = await signup("dean1")
        await signup("dean2")

        response = await client.delete("/users", params={"username": "dean2"}, headers=bearer(token))

        assert response.status_code == 403
        assert response.json()["msg"] == "Cannot delete a different user"
        assert sorted((await client.get("/users")).json()) == ["dean1", "dean2"]

    @pytest.mark.asyncio
    async def test_missing_username_param(self, client, signup):
        token = await signup("dean")

        response = await client.delete("/users", headers=bearer(token))

        assert response.status_code == 400
        details = response.json()["details"]
        assert details[0]["location"] == "query"
        assert details[0]["param"] == "username"

    @pytest.mark.asyncio
    async def test_empty_username_param(self, client, signup):
        token = await signup("dean")
        response = await client.delete("/users", params={"username": ""}, headers=bearer(token))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_token(self, client, signup):
        await signup("dean")

        response = await client.delete("/users", params={"username": "dean"})

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json() == {"code": 401, "msg": "Invalid token", "details": None}
