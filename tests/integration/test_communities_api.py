"""Learning communities: creation rules, membership and members-only content."""

import pytest
from httpx import AsyncClient

from tests.helpers import auth_headers, make_community, make_user


def _resource(title: str, featured: bool = False) -> dict:
    return {
        "title": title,
        "resource_type": "link",
        "resource_url": f"https://notes.example/{title.lower().replace(' ', '-')}",
        "is_featured": featured,
    }


class TestCreate:
    @pytest.mark.asyncio
    async def test_first_year_cannot_create(self, client: AsyncClient, db_session):
        fresher = await make_user(db_session, year_of_study=1)
        response = await client.post(
            "/api/v1/communities",
            json={"name": "Freshers", "category": "Python"},
            headers=auth_headers(fresher.id),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_creator_becomes_admin(self, client: AsyncClient, db_session):
        senior = await make_user(db_session, year_of_study=3, full_name="Senior")
        headers = auth_headers(senior.id)
        response = await client.post(
            "/api/v1/communities", json={"name": "ML Circle", "category": "Machine Learning"}, headers=headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["member_count"] == 1
        assert data["is_member"] is True

        members = await client.get(f"/api/v1/communities/{data['id']}/members", headers=headers)
        assert members.status_code == 200
        [member] = members.json()["members"]
        assert member["user_id"] == senior.id
        assert member["role"] == "admin"
        assert member["full_name"] == "Senior"

    @pytest.mark.asyncio
    async def test_unknown_category(self, client: AsyncClient, db_session):
        senior = await make_user(db_session, year_of_study=2)
        response = await client.post(
            "/api/v1/communities", json={"name": "Odd", "category": "Knitting"}, headers=auth_headers(senior.id)
        )
        assert response.status_code == 400


class TestMembership:
    @pytest.mark.asyncio
    async def test_join_roles_by_year(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=4)
        second_year = await make_user(db_session, year_of_study=2)
        fresher = await make_user(db_session, year_of_study=1)
        community = await make_community(db_session, creator)
        url = f"/api/v1/communities/{community.id}/join"

        response = await client.post(url, headers=auth_headers(second_year.id))
        assert response.status_code == 201
        assert response.json()["role"] == "senior"

        response = await client.post(url, headers=auth_headers(fresher.id))
        assert response.status_code == 201
        assert response.json()["role"] == "member"

        again = await client.post(url, headers=auth_headers(fresher.id))
        assert again.status_code == 409

        detail = await client.get(f"/api/v1/communities/{community.id}", headers=auth_headers(fresher.id))
        assert detail.json()["member_count"] == 3

    @pytest.mark.asyncio
    async def test_outsider_sees_no_members(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=4)
        outsider = await make_user(db_session)
        community = await make_community(db_session, creator)

        response = await client.get(f"/api/v1/communities/{community.id}/members", headers=auth_headers(outsider.id))
        assert response.status_code == 200
        assert response.json()["members"] == []


class TestResources:
    @pytest.mark.asyncio
    async def test_featured_first_and_members_only(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=3)
        outsider = await make_user(db_session, year_of_study=3)
        community = await make_community(db_session, creator)
        url = f"/api/v1/communities/{community.id}/resources"
        headers = auth_headers(creator.id)

        for body in (_resource("Plain notes"), _resource("Starter kit", featured=True)):
            response = await client.post(url, json=body, headers=headers)
            assert response.status_code == 201

        response = await client.get(url, headers=headers)
        assert [r["title"] for r in response.json()["resources"]] == ["Starter kit", "Plain notes"]

        response = await client.get(url, headers=auth_headers(outsider.id))
        assert response.status_code == 200
        assert response.json()["resources"] == []

    @pytest.mark.asyncio
    async def test_junior_member_cannot_share(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=3)
        fresher = await make_user(db_session, year_of_study=1)
        community = await make_community(db_session, creator, members=(fresher,))

        response = await client.post(
            f"/api/v1/communities/{community.id}/resources",
            json=_resource("My notes"),
            headers=auth_headers(fresher.id),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_senior_outsider_cannot_share(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=3)
        outsider = await make_user(db_session, year_of_study=4)
        community = await make_community(db_session, creator)

        response = await client.post(
            f"/api/v1/communities/{community.id}/resources",
            json=_resource("Drive-by"),
            headers=auth_headers(outsider.id),
        )
        assert response.status_code == 403


class TestSessions:
    @pytest.mark.asyncio
    async def test_senior_member_hosts(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=3)
        fresher = await make_user(db_session, year_of_study=1)
        community = await make_community(db_session, creator, members=(fresher,))
        url = f"/api/v1/communities/{community.id}/sessions"
        body = {"title": "Code review night", "session_date": "2026-11-05T18:00:00Z"}

        response = await client.post(url, json=body, headers=auth_headers(creator.id))
        assert response.status_code == 201
        assert response.json()["host_id"] == creator.id

        response = await client.post(url, json=body, headers=auth_headers(fresher.id))
        assert response.status_code == 403

        listing = await client.get(url, headers=auth_headers(fresher.id))
        assert len(listing.json()["sessions"]) == 1


class TestUpdate:
    @pytest.mark.asyncio
    async def test_creator_deactivates_and_others_lose_sight(self, client: AsyncClient, db_session):
        creator = await make_user(db_session, year_of_study=3)
        member = await make_user(db_session, year_of_study=2)
        community = await make_community(db_session, creator, members=(member,))

        response = await client.patch(
            f"/api/v1/communities/{community.id}", json={"is_active": False}, headers=auth_headers(creator.id)
        )
        assert response.status_code == 200

        listing = await client.get("/api/v1/communities", headers=auth_headers(member.id))
        assert listing.json()["communities"] == []

        forbidden = await client.patch(
            f"/api/v1/communities/{community.id}", json={"is_active": True}, headers=auth_headers(member.id)
        )
        assert forbidden.status_code == 404
