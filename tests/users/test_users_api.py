"""Profile and user administration endpoint tests."""

from __future__ import annotations

from datetime import date, datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from casedesk.auth.password import verify_password
from casedesk.db.models import Case, Notification, User


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile(self, client: AsyncClient, user, user_headers):
        response = await client.get("/api/profile", headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == user.id
        assert body["email"] == "user@example.com"
        assert "password_hash" not in body

    @pytest.mark.asyncio
    async def test_update_profile(self, client: AsyncClient, user, user_headers):
        response = await client.put(
            "/api/profile",
            json={"username": "Budi", "email": "Budi@Example.com", "position": "Panitera", "phone": "0812"},
            headers=user_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "Budi"
        assert body["email"] == "budi@example.com"
        assert body["position"] == "Panitera"

    @pytest.mark.asyncio
    async def test_email_taken(self, client: AsyncClient, make_user, user, user_headers):
        await make_user("taken@example.com", username="other")

        response = await client.put(
            "/api/profile",
            json={"username": "user", "email": "taken@example.com"},
            headers=user_headers,
        )

        assert response.status_code == 409


class TestAdminAccess:
    @pytest.mark.asyncio
    async def test_regular_user_forbidden(self, client: AsyncClient, user_headers):
        response = await client.get("/api/users", headers=user_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_lists_users(self, client: AsyncClient, admin_headers, user):
        response = await client.get("/api/users", headers=admin_headers)

        assert response.status_code == 200
        assert {u["email"] for u in response.json()} == {"admin@example.com", "user@example.com"}


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_admin_creates_user(self, client: AsyncClient, db_session, admin_headers):
        response = await client.post(
            "/api/users",
            json={"username": "siti", "email": "siti@example.com", "password": "rahasia1", "role": "user"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        created = (await db_session.execute(select(User).where(User.email == "siti@example.com"))).scalar_one()
        assert verify_password("rahasia1", created.password_hash)

    @pytest.mark.asyncio
    async def test_short_password(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/users",
            json={"username": "siti", "email": "siti@example.com", "password": "abc"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient, admin_headers, user):
        response = await client.post(
            "/api/users",
            json={"username": "dup", "email": "user@example.com", "password": "rahasia1"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_role(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/users",
            json={"username": "x", "email": "x@example.com", "password": "rahasia1", "role": "root"},
            headers=admin_headers,
        )
        assert response.status_code == 422


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_admin_resets_password(self, client: AsyncClient, db_session, admin_headers, user):
        response = await client.put(
            f"/api/users/{user.id}",
            json={"username": "user", "email": "user@example.com", "password": "newpass1"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        stored = (await db_session.execute(select(User.password_hash).where(User.id == user.id))).scalar_one()
        assert verify_password("newpass1", stored)

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.put(
            "/api/users/999",
            json={"username": "x", "email": "x@example.com"},
            headers=admin_headers,
        )
        assert response.status_code == 404


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_delete_cascades(self, client: AsyncClient, db_session, admin_headers, user, make_case):
        case = await make_case(user.id, datetime(2026, 10, 20, 9, 0))
        db_session.add(
            Notification(user_id=user.id, case_id=case.id, message="r", is_sent=True, notify_date=date(2026, 10, 19))
        )
        await db_session.commit()

        response = await client.delete(f"/api/users/{user.id}", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["deleted_user"]["email"] == "user@example.com"
        users = (await db_session.execute(select(func.count()).select_from(User).where(User.id == user.id))).scalar_one()
        cases = (await db_session.execute(select(func.count()).select_from(Case))).scalar_one()
        notifications = (await db_session.execute(select(func.count()).select_from(Notification))).scalar_one()
        assert (users, cases, notifications) == (0, 0, 0)

    @pytest.mark.asyncio
    async def test_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.delete("/api/users/999", headers=admin_headers)
        assert response.status_code == 404
