# tests/routes/test_user_console.py
"""Tests for the user console routes."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from inkwell.models import UserDB


class TestAccessControl:
    @pytest.mark.asyncio
    async def test_anonymous_is_unauthorized(self, client: AsyncClient) -> None:
        response = await client.get("/console/users/1/10/5")

        assert response.status_code == 401
        assert response.json() == {"detail": "Not logged in"}

    @pytest.mark.asyncio
    async def test_non_admin_is_forbidden(
        self,
        client: AsyncClient,
        user_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/console/user/",
            json={"userName": "x", "userEmail": "x@example.com", "userPassword": "pw"},
            headers=user_headers,
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_garbage_token_is_unauthorized(self, client: AsyncClient) -> None:
        response = await client.get("/console/users/1/10/5", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401


class TestUserCrud:
    @pytest.mark.asyncio
    async def test_add_then_get_user(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.post(
            "/console/user/",
            json={"userName": "Ann", "userEmail": "Ann@Example.com", "userPassword": "secret"},
            headers=admin_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["statusCode"] is True
        assert body["msg"] == "Added successfully"

        detail = await client.get(f"/console/user/{body['oId']}", headers=admin_headers)
        user = detail.json()["user"]
        assert user["userEmail"] == "ann@example.com"
        assert user["userRole"] == "defaultRole"
        assert "userPassword" not in user
        assert "password_hash" not in user

    @pytest.mark.asyncio
    async def test_duplicate_email_reports_status_false(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        admin_user: UserDB,
    ) -> None:
        response = await client.post(
            "/console/user/",
            json={"userName": "Copy", "userEmail": admin_user.email, "userPassword": "secret"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"statusCode": False, "msg": "Duplicated email"}

    @pytest.mark.asyncio
    async def test_invalid_role_is_rejected(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.post(
            "/console/user/",
            json={
                "userName": "Ann",
                "userEmail": "ann@example.com",
                "userPassword": "secret",
                "userRole": "superRole",
            },
            headers=admin_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_user(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        regular_user: UserDB,
    ) -> None:
        response = await client.put(
            "/console/user/",
            json={
                "oId": str(regular_user.id),
                "userName": "Reader Two",
                "userEmail": "reader2@example.com",
                "userPassword": "new-password",
            },
            headers=admin_headers,
        )

        assert response.json() == {"statusCode": True, "msg": "Updated successfully"}

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.put(
            "/console/user/",
            json={
                "oId": str(uuid4()),
                "userName": "Ghost",
                "userEmail": "ghost@example.com",
                "userPassword": "pw",
            },
            headers=admin_headers,
        )

        assert response.json()["statusCode"] is False

    @pytest.mark.asyncio
    async def test_remove_unknown_user_succeeds(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
    ) -> None:
        response = await client.delete(f"/console/user/{uuid4()}", headers=admin_headers)

        assert response.json() == {"statusCode": True, "msg": "Removed successfully"}

    @pytest.mark.asyncio
    async def test_get_unknown_user(self, client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await client.get(f"/console/user/{uuid4()}", headers=admin_headers)

        assert response.json() == {"statusCode": False, "msg": "Get failed"}

    @pytest.mark.asyncio
    async def test_list_users(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        regular_user: UserDB,
    ) -> None:
        response = await client.get("/console/users/1/10/5", headers=admin_headers)

        body = response.json()
        assert body["statusCode"] is True
        assert body["pagination"] == {"paginationPageCount": 1, "paginationPageNums": [1]}
        assert {user["userEmail"] for user in body["users"]} == {
            "admin@example.com",
            "reader@example.com",
        }
