"""Profile endpoints: sign-up, listing and self-service edits."""

import uuid

import pytest
from httpx import AsyncClient

from tests.helpers import auth_headers, make_user


class TestSignUp:
    @pytest.mark.asyncio
    async def test_create_own_profile(self, client: AsyncClient):
        user_id = str(uuid.uuid4())
        response = await client.post(
            "/api/v1/users",
            json={"email": "asha@campus.example", "full_name": "Asha", "department": "CSE", "year_of_study": 2},
            headers=auth_headers(user_id),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["id"] == user_id
        assert data["role"] == "student"
        assert data["xp_points"] == 0
        assert data["level_number"] == 1
        assert data["is_verified"] is False

    @pytest.mark.asyncio
    async def test_duplicate_profile_conflicts(self, client: AsyncClient):
        user_id = str(uuid.uuid4())
        body = {"email": "dup@campus.example", "full_name": "Dup", "department": "CSE"}
        first = await client.post("/api/v1/users", json=body, headers=auth_headers(user_id))
        assert first.status_code == 201
        second = await client.post("/api/v1/users", json=body, headers=auth_headers(user_id))
        assert second.status_code == 409

    @pytest.mark.asyncio
    async def test_email_taken_conflicts(self, client: AsyncClient):
        body = {"email": "same@campus.example", "full_name": "A", "department": "CSE"}
        await client.post("/api/v1/users", json=body, headers=auth_headers(str(uuid.uuid4())))
        response = await client.post("/api/v1/users", json=body, headers=auth_headers(str(uuid.uuid4())))
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/users",
            json={"email": "not-an-email", "full_name": "A", "department": "CSE"},
            headers=auth_headers(str(uuid.uuid4())),
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_profile_required_for_other_routes(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers=auth_headers(str(uuid.uuid4())))
        assert response.status_code == 401


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me")
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestProfiles:
    @pytest.mark.asyncio
    async def test_get_me_and_other(self, client: AsyncClient, db_session):
        me = await make_user(db_session, full_name="Me")
        other = await make_user(db_session, full_name="Other")

        response = await client.get("/api/v1/users/me", headers=auth_headers(me.id))
        assert response.status_code == 200
        assert response.json()["full_name"] == "Me"

        response = await client.get(f"/api/v1/users/{other.id}", headers=auth_headers(me.id))
        assert response.status_code == 200
        assert response.json()["full_name"] == "Other"

    @pytest.mark.asyncio
    async def test_unknown_user_404(self, client: AsyncClient, db_session):
        me = await make_user(db_session)
        response = await client.get(f"/api/v1/users/{uuid.uuid4()}", headers=auth_headers(me.id))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_filtered_by_role(self, client: AsyncClient, db_session):
        me = await make_user(db_session)
        await make_user(db_session, role="mentor")
        await make_user(db_session, role="mentor")

        response = await client.get("/api/v1/users?role=mentor", headers=auth_headers(me.id))
        assert response.status_code == 200
        users = response.json()["users"]
        assert len(users) == 2
        assert all(u["role"] == "mentor" for u in users)

    @pytest.mark.asyncio
    async def test_unknown_role_filter(self, client: AsyncClient, db_session):
        me = await make_user(db_session)
        response = await client.get("/api/v1/users?role=wizard", headers=auth_headers(me.id))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_profile_fields(self, client: AsyncClient, db_session):
        me = await make_user(db_session)
        response = await client.patch(
            "/api/v1/users/me",
            json={"bio": "Learning Rust", "year_of_study": 2, "github_url": "https://github.com/me"},
            headers=auth_headers(me.id),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Learning Rust"
        assert data["year_of_study"] == 2
        assert data["github_url"] == "https://github.com/me"

    @pytest.mark.asyncio
    async def test_progression_fields_not_writable(self, client: AsyncClient, db_session):
        """Unknown fields are ignored by the schema; XP and role stay put."""
        me = await make_user(db_session)
        response = await client.patch(
            "/api/v1/users/me",
            json={"xp_points": 9999, "role": "admin", "bio": "hi"},
            headers=auth_headers(me.id),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["xp_points"] == 0
        assert data["role"] == "student"

    @pytest.mark.asyncio
    async def test_cannot_clear_required_field(self, client: AsyncClient, db_session):
        me = await make_user(db_session)
        response = await client.patch(
            "/api/v1/users/me", json={"full_name": None}, headers=auth_headers(me.id)
        )
        assert response.status_code == 400
