"""Enrollment lifecycle over HTTP: enroll, complete, certificate, review."""

import pytest
from httpx import AsyncClient

from tests.helpers import auth_headers, make_course, make_enrollment, make_user


class TestEnroll:
    @pytest.mark.asyncio
    async def test_enroll_and_list(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)

        response = await client.post(
            "/api/v1/enrollments", json={"course_id": course.id}, headers=auth_headers(student.id)
        )
        assert response.status_code == 201
        data = response.json()
        assert data["student_id"] == student.id
        assert data["course_title"] == "Intro to Python"
        assert data["is_completed"] is False

        # Both parties see it
        for viewer in (student, mentor):
            response = await client.get("/api/v1/enrollments", headers=auth_headers(viewer.id))
            assert [e["id"] for e in response.json()["enrollments"]] == [data["id"]]

    @pytest.mark.asyncio
    async def test_duplicate_enrollment(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)
        headers = auth_headers(student.id)

        await client.post("/api/v1/enrollments", json={"course_id": course.id}, headers=headers)
        response = await client.post("/api/v1/enrollments", json={"course_id": course.id}, headers=headers)
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_cannot_enroll_in_inactive_course(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor, is_active=False)
        response = await client.post(
            "/api/v1/enrollments", json={"course_id": course.id}, headers=auth_headers(student.id)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_outsider_cannot_see_enrollment(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        outsider = await make_user(db_session)
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)

        response = await client.get(f"/api/v1/enrollments/{enrollment.id}", headers=auth_headers(outsider.id))
        assert response.status_code == 404
        response = await client.get("/api/v1/enrollments", headers=auth_headers(outsider.id))
        assert response.json()["total"] == 0


class TestCompletion:
    @pytest.mark.asyncio
    async def test_mentor_completes(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session, xp_points=80)
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)
        url = f"/api/v1/enrollments/{enrollment.id}"

        response = await client.patch(url, json={"is_completed": True}, headers=auth_headers(mentor.id))
        assert response.status_code == 200
        data = response.json()
        assert data["awarded"] is True
        assert data["xp_points"] == 130
        assert data["level_number"] == 2
        assert data["leveled_up"] is True
        assert data["certificate_id"].startswith("CERT-")
        assert data["enrollment"]["is_completed"] is True
        assert data["enrollment"]["completed_at"] is not None

        repeat = await client.patch(url, json={"is_completed": True}, headers=auth_headers(mentor.id))
        assert repeat.status_code == 200
        assert repeat.json()["awarded"] is False
        assert repeat.json()["certificate_id"] is None

        level = await client.get("/api/v1/users/me/level", headers=auth_headers(student.id))
        assert level.json()["xp_points"] == 130
        assert level.json()["level"] == 2

    @pytest.mark.asyncio
    async def test_student_cannot_complete_own(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)

        response = await client.patch(
            f"/api/v1/enrollments/{enrollment.id}",
            json={"is_completed": True},
            headers=auth_headers(student.id),
        )
        assert response.status_code == 403

        certificates = await client.get("/api/v1/certificates", headers=auth_headers(student.id))
        assert certificates.json()["certificates"] == []

    @pytest.mark.asyncio
    async def test_completion_cannot_be_reopened(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)
        url = f"/api/v1/enrollments/{enrollment.id}"
        headers = auth_headers(mentor.id)

        await client.patch(url, json={"is_completed": True}, headers=headers)
        response = await client.patch(url, json={"is_completed": False}, headers=headers)
        assert response.status_code == 400


class TestCertificates:
    @pytest.mark.asyncio
    async def test_visible_to_student_and_mentor_only(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        outsider = await make_user(db_session, role="admin")
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)

        response = await client.patch(
            f"/api/v1/enrollments/{enrollment.id}",
            json={"is_completed": True},
            headers=auth_headers(mentor.id),
        )
        certificate_id = response.json()["certificate_id"]

        for viewer in (student, mentor):
            response = await client.get(f"/api/v1/certificates/{certificate_id}", headers=auth_headers(viewer.id))
            assert response.status_code == 200
            assert response.json()["course_id"] == course.id

        response = await client.get(f"/api/v1/certificates/{certificate_id}", headers=auth_headers(outsider.id))
        assert response.status_code == 404
        response = await client.get("/api/v1/certificates", headers=auth_headers(outsider.id))
        assert response.json()["certificates"] == []


class TestReviews:
    @pytest.mark.asyncio
    async def test_review_gated_on_completion(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)
        reviews_url = f"/api/v1/courses/{course.id}/reviews"
        body = {"rating": 5, "review_text": "Clear and practical"}

        early = await client.post(reviews_url, json=body, headers=auth_headers(student.id))
        assert early.status_code == 403

        await client.patch(
            f"/api/v1/enrollments/{enrollment.id}",
            json={"is_completed": True},
            headers=auth_headers(mentor.id),
        )

        response = await client.post(reviews_url, json=body, headers=auth_headers(student.id))
        assert response.status_code == 201
        assert response.json()["mentor_id"] == mentor.id

        listing = await client.get(reviews_url, headers=auth_headers(mentor.id))
        assert [r["rating"] for r in listing.json()["reviews"]] == [5]

    @pytest.mark.asyncio
    async def test_graduate_reviews_deactivated_course(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor)
        enrollment = await make_enrollment(db_session, student, course)

        completed = await client.patch(
            f"/api/v1/enrollments/{enrollment.id}",
            json={"is_completed": True},
            headers=auth_headers(mentor.id),
        )
        assert completed.status_code == 200
        deactivated = await client.patch(
            f"/api/v1/courses/{course.id}", json={"is_active": False}, headers=auth_headers(mentor.id)
        )
        assert deactivated.status_code == 200

        response = await client.post(
            f"/api/v1/courses/{course.id}/reviews", json={"rating": 5}, headers=auth_headers(student.id)
        )
        assert response.status_code == 201
        assert response.json()["mentor_id"] == mentor.id

    @pytest.mark.asyncio
    async def test_non_graduate_cannot_review_deactivated_course(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        student = await make_user(db_session)
        course = await make_course(db_session, mentor, is_active=False)
        await make_enrollment(db_session, student, course)

        response = await client.post(
            f"/api/v1/courses/{course.id}/reviews", json={"rating": 3}, headers=auth_headers(student.id)
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_review_unknown_course(self, client: AsyncClient, db_session):
        student = await make_user(db_session)
        response = await client.post(
            "/api/v1/courses/no-such-course/reviews", json={"rating": 4}, headers=auth_headers(student.id)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_rating_bounds(self, client: AsyncClient, db_session):
        mentor = await make_user(db_session, role="mentor")
        course = await make_course(db_session, mentor)
        response = await client.post(
            f"/api/v1/courses/{course.id}/reviews", json={"rating": 6}, headers=auth_headers(mentor.id)
        )
        assert response.status_code == 422
