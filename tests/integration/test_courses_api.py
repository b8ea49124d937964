"""Course catalog, authoring and mentor session endpoints."""

import pytest
from httpx import AsyncClient

from tests.helpers import auth_headers, make_course, make_user

COURSE_BODY = {
    "title": "FastAPI from scratch",
    "description": "Build and ship an async API",
    "domain": "Web Development",
    "price": "0",
    "duration_hours": 6,
}


class TestCatalog:
    @pytest.mark.asyncio
    async def test_domains(self, client: AsyncClient, db_session):
        me = await make_user(db_session)
        response = await client.get("/api/v1/courses/domains", headers=auth_headers(me.id))
        assert response.status_code == 200
        assert "Python" in response.json()["domains"]

    @pytest.mark.asyncio
    async def test_inactive_course_hidden(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        visible = await make_course(db_session, mentor, title="Visible")
        hidden = await make_course(db_session, mentor, title="Hidden", is_active=False)

        response = await client.get("/api/v1/courses", headers=auth_headers(student.id))
        assert response.status_code == 200
        ids = [c["id"] for c in response.json()["courses"]]
        assert ids == [visible.id]

        response = await client.get(f"/api/v1/courses/{hidden.id}", headers=auth_headers(student.id))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_search_and_price_filters(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        await make_course(db_session, mentor, title="Rust basics", domain="DevOps")
        paid = await make_course(db_session, mentor, title="Advanced Python", price=499)

        headers = auth_headers(student.id)
        response = await client.get("/api/v1/courses?search=rust", headers=headers)
        assert [c["title"] for c in response.json()["courses"]] == ["Rust basics"]

        response = await client.get("/api/v1/courses?price=paid", headers=headers)
        assert [c["id"] for c in response.json()["courses"]] == [paid.id]

        response = await client.get("/api/v1/courses?price=free", headers=headers)
        assert [c["title"] for c in response.json()["courses"]] == ["Rust basics"]

    @pytest.mark.asyncio
    async def test_bad_price_filter(self, client: AsyncClient, db_session):
        student = await make_user(db_session)
        response = await client.get("/api/v1/courses?price=cheap", headers=auth_headers(student.id))
        assert response.status_code == 422


class TestAuthoring:
    @pytest.mark.asyncio
    async def test_mentor_creates_course(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        response = await client.post("/api/v1/courses", json=COURSE_BODY, headers=auth_headers(mentor.id))
        assert response.status_code == 201
        data = response.json()
        assert data["mentor_id"] == mentor.id
        assert data["is_active"] is True

    @pytest.mark.asyncio
    async def test_student_cannot_create_course(self, client: AsyncClient, db_session):
        student = await make_user(db_session)
        response = await client.post("/api/v1/courses", json=COURSE_BODY, headers=auth_headers(student.id))
        assert response.status_code == 403

        response = await client.get("/api/v1/courses", headers=auth_headers(student.id))
        assert response.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_domain_rejected(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        body = {**COURSE_BODY, "domain": "Basket Weaving"}
        response = await client.post("/api/v1/courses", json=body, headers=auth_headers(mentor.id))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_owner_deactivates_and_reactivates(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        course = await make_course(db_session, mentor)
        headers = auth_headers(mentor.id)

        response = await client.patch(f"/api/v1/courses/{course.id}", json={"is_active": False}, headers=headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        response = await client.patch(f"/api/v1/courses/{course.id}", json={"is_active": True}, headers=headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is True

    @pytest.mark.asyncio
    async def test_other_mentor_cannot_edit(self, client: AsyncClient, db_session):
        owner = await make_user(db_session, role="mentor")
        rival = await make_user(db_session, role="mentor")
        course = await make_course(db_session, owner)
        response = await client.patch(
            f"/api/v1/courses/{course.id}", json={"title": "Mine now"}, headers=auth_headers(rival.id)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_cannot_clear_title(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        course = await make_course(db_session, mentor)
        response = await client.patch(
            f"/api/v1/courses/{course.id}", json={"title": None}, headers=auth_headers(mentor.id)
        )
        assert response.status_code == 400


class TestMentorSessions:
    @pytest.mark.asyncio
    async def test_schedule_and_complete(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        course = await make_course(db_session, mentor)
        headers = auth_headers(mentor.id)

        response = await client.post(
            f"/api/v1/courses/{course.id}/sessions",
            json={"session_date": "2026-11-02T10:00:00Z", "duration_minutes": 60},
            headers=headers,
        )
        assert response.status_code == 201
        session_id = response.json()["id"]

        first = await client.post(f"/api/v1/sessions/{session_id}/complete", headers=headers)
        assert first.status_code == 200
        assert first.json()["is_completed"] is True
        stamped = first.json()["completed_at"]
        assert stamped is not None

        second = await client.post(f"/api/v1/sessions/{session_id}/complete", headers=headers)
        assert second.json()["completed_at"] == stamped

        response = await client.get(f"/api/v1/courses/{course.id}/sessions", headers=headers)
        assert len(response.json()["sessions"]) == 1

    @pytest.mark.asyncio
    async def test_student_cannot_schedule(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)
        response = await client.post(
            f"/api/v1/courses/{course.id}/sessions",
            json={"session_date": "2026-11-02T10:00:00Z", "duration_minutes": 60},
            headers=auth_headers(student.id),
        )
        assert response.status_code == 403
