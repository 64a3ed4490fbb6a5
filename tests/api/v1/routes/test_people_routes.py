from __future__ import annotations

import pytest

from tests.factories import create_team, create_user

pytestmark = pytest.mark.asyncio


async def test_create_user_and_reject_duplicate_email(client):
    payload = {"name": "Ana", "email": "Ana@Example.com", "password": "secret1"}

    created = await client.post("/api/v1/users", json=payload)
    duplicate = await client.post("/api/v1/users", json=payload)

    assert created.status_code == 201
    assert created.json()["data"]["email"] == "ana@example.com"
    assert created.json()["data"]["role"] == "student"
    assert duplicate.status_code == 409


async def test_user_listing_puts_admins_first(client, student_user):
    response = await client.get("/api/v1/users")

    emails = [u["email"] for u in response.json()["data"]]
    assert emails == ["admin@example.com", "student@example.com"]


async def test_get_user_includes_submission_totals(client, student_user):
    response = await client.get(f"/api/v1/users/{student_user.id}")

    data = response.json()["data"]
    assert data["submission_count"] == 0
    assert data["total_submission_points"] == 0
    assert data["team"] is None


async def test_update_user_can_clear_team(client, db_session):
    team = await create_team(db_session, "Falcons")
    member = await create_user(db_session, "member@example.com", team=team)

    response = await client.put(
        f"/api/v1/users/{member.id}", json={"team_id": None, "name": "Renamed"}
    )

    data = response.json()["data"]
    assert data["team_id"] is None
    assert data["name"] == "Renamed"


async def test_delete_user_only_deactivates(client, db_session, student_user):
    response = await client.delete(f"/api/v1/users/{student_user.id}")

    assert response.status_code == 200
    assert response.json()["msg"] == "User deactivated successfully"
    fetched = await client.get(f"/api/v1/users/{student_user.id}")
    assert fetched.json()["data"]["is_active"] is False


async def test_team_name_must_be_unique(client):
    first = await client.post("/api/v1/teams", json={"name": "Falcons"})
    second = await client.post("/api/v1/teams", json={"name": "Falcons"})

    assert first.status_code == 201
    assert first.json()["data"]["member_count"] == 0
    assert second.status_code == 409


async def test_team_listing_hides_inactive_members(client, login_as, db_session, student_user):
    team = await create_team(db_session, "Falcons")
    await create_user(db_session, "on@example.com", team=team)
    await create_user(db_session, "off@example.com", team=team, is_active=False)
    login_as(student_user)

    response = await client.get("/api/v1/teams")

    [listed] = response.json()["data"]
    assert listed["member_count"] == 1
    assert [m["email"] for m in listed["members"]] == ["on@example.com"]


async def test_deleting_team_unassigns_members(client, db_session):
    team = await create_team(db_session, "Falcons")
    leader = await create_user(db_session, "lead@example.com", team=team, is_group_leader=True)

    response = await client.delete(f"/api/v1/teams/{team.id}")

    assert response.status_code == 200
    await db_session.refresh(leader)
    assert leader.team_id is None
    assert leader.is_group_leader is False
    assert (await client.get(f"/api/v1/teams/{team.id}")).status_code == 404


async def test_deactivated_team_leaves_leaderboard(client, db_session):
    team = await create_team(db_session, "Falcons", total_score=50)
    await create_team(db_session, "Hawks", total_score=10)

    response = await client.put(f"/api/v1/teams/{team.id}", json={"is_active": False})

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False
    board = await client.get("/api/v1/leaderboards", params={"type": "team"})
    assert [t["name"] for t in board.json()["data"]["team"]] == ["Hawks"]
    await db_session.refresh(team)
    assert team.is_active is False
    assert (await client.get(f"/api/v1/teams/{team.id}")).status_code == 200
