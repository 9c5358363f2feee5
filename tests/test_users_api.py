"""
Happy Thoughts API — User Endpoint Tests
==========================================

What:  POST /users and POST /users/login through the full HTTP stack
       (middleware, validation, exception handlers, SQLite store).
"""

import pytest


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_returns_id_and_token(self, test_client):
        response = await test_client.post(
            "/users", json={"userName": "Alice", "password": "correct horse"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User created successfully!"
        assert set(body["response"]) == {"id", "accessToken"}
        assert len(body["response"]["accessToken"]) == 256

    @pytest.mark.asyncio
    async def test_user_names_collide_case_insensitively(self, test_client, register_user):
        await register_user("alice")

        response = await test_client.post(
            "/users", json={"userName": "ALICE", "password": "another one"}
        )

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "response": None,
            "message": "User name already exists",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"userName": "alice"},
            {"password": "secret"},
            {"userName": "", "password": "secret"},
            {"userName": "alice", "password": ""},
        ],
    )
    async def test_missing_fields_are_rejected(self, test_client, payload):
        response = await test_client.post("/users", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errors"]


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_the_stored_token(self, test_client, register_user):
        user_id, token = await register_user("bob", "hunter22")

        response = await test_client.post(
            "/users/login", json={"userName": "Bob", "password": "hunter22"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Log in successful!"
        assert body["response"] == {"id": user_id, "userName": "bob", "accessToken": token}

    @pytest.mark.asyncio
    async def test_unknown_user_is_404(self, test_client):
        response = await test_client.post(
            "/users/login", json={"userName": "nobody", "password": "whatever"}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, test_client, register_user):
        await register_user("carol", "right-password")

        response = await test_client.post(
            "/users/login", json={"userName": "carol", "password": "wrong-password"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid password"

    @pytest.mark.asyncio
    async def test_password_hash_is_never_returned(self, test_client, register_user):
        await register_user("dave", "pw-for-dave")

        response = await test_client.post(
            "/users/login", json={"userName": "dave", "password": "pw-for-dave"}
        )

        assert "password" not in response.text
        assert "$2b$" not in response.text
