from __future__ import annotations

import pytest

from tests.factories import create_game

pytestmark = pytest.mark.asyncio


async def _create_session_with_rounds(client, count=2):
    created = await client.post(
        "/api/v1/game-sessions", json={"name": "Autumn Cohort", "max_rounds": count}
    )
    session_id = created.json()["data"]["id"]
    round_ids = []
    for number in range(1, count + 1):
        response = await client.post(
            "/api/v1/rounds",
            json={
                "game_session_id": session_id,
                "round_number": number,
                "type": "individual",
                "title": f"Round {number}",
            },
        )
        assert response.status_code == 201
        round_ids.append(response.json()["data"]["id"])
    return session_id, round_ids


async def test_create_session_requires_a_name(client):
    response = await client.post("/api/v1/game-sessions", json={"name": ""})

    assert response.status_code == 400
    assert response.json()["msg"] == "Game session name is required"


async def test_students_cannot_create_sessions(client, login_as, student_user):
    login_as(student_user)

    response = await client.post("/api/v1/game-sessions", json={"name": "Mine"})

    assert response.status_code == 403
    assert response.json()["error_code"] == "ADMIN_REQUIRED"


async def test_start_session_activates_first_round(client):
    session_id, round_ids = await _create_session_with_rounds(client)

    response = await client.post(f"/api/v1/game-sessions/{session_id}/start")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["is_active"] is True
    assert data["current_round_id"] == round_ids[0]
    statuses = {r["id"]: r["status"] for r in data["rounds"]}
    assert statuses == {round_ids[0]: "active", round_ids[1]: "pending"}


async def test_start_without_rounds_reports_error_code(client):
    created = await client.post("/api/v1/game-sessions", json={"name": "Empty"})

    response = await client.post(f"/api/v1/game-sessions/{created.json()['data']['id']}/start")

    assert response.status_code == 400
    assert response.json()["error_code"] == "NO_ROUNDS_FOUND"


async def test_activate_then_end_round(client):
    session_id, round_ids = await _create_session_with_rounds(client)
    await client.post(f"/api/v1/rounds/{round_ids[0]}/activate")

    activated = await client.post(f"/api/v1/rounds/{round_ids[1]}/activate")
    assert activated.json()["data"]["status"] == "active"

    listed = await client.get("/api/v1/rounds", params={"game_session_id": session_id})
    statuses = [r["status"] for r in listed.json()["data"]]
    assert statuses == ["ended", "active"]

    ended = await client.post(f"/api/v1/rounds/{round_ids[1]}/end")
    assert ended.json()["data"]["status"] == "ended"

    again = await client.post(f"/api/v1/rounds/{round_ids[1]}/end")
    assert again.status_code == 400
    assert again.json()["error_code"] == "ROUND_NOT_ACTIVE"


async def test_duplicate_round_number_conflicts(client):
    session_id, _ = await _create_session_with_rounds(client, count=1)

    response = await client.post(
        "/api/v1/rounds",
        json={"game_session_id": session_id, "round_number": 1, "type": "group", "title": "Dup"},
    )

    assert response.status_code == 409


async def test_session_detail_counts_round_questions(client, login_as, db_session, student_user):
    game = await create_game(db_session)
    login_as(student_user)

    response = await client.get(f"/api/v1/game-sessions/{game['session'].id}")

    [round_summary] = response.json()["data"]["rounds"]
    assert round_summary["question_count"] == 1
    assert round_summary["submission_count"] == 0


async def test_question_crud(client, login_as, db_session, student_user):
    game = await create_game(db_session)
    round_id = str(game["round"].id)

    created = await client.post(
        "/api/v1/questions",
        json={
            "round_id": round_id,
            "title": "Hiring",
            "description": "Whom do you hire first?",
            "options": [{"text": "Engineer", "points": 15}, {"text": "Sales", "points": 5}],
        },
    )
    assert created.status_code == 201
    question = created.json()["data"]
    assert question["min_reasoning_words"] == 15
    assert question["submission_count"] == 0

    keep = question["options"][0]
    updated = await client.put(
        f"/api/v1/questions/{question['id']}",
        json={"options": [{"id": keep["id"], "text": "Senior engineer", "points": 20}]},
    )
    assert [o["id"] for o in updated.json()["data"]["options"]] == [keep["id"]]

    deleted = await client.delete(f"/api/v1/questions/{question['id']}")
    assert deleted.status_code == 200

    login_as(student_user)
    listed = await client.get("/api/v1/questions", params={"round_id": round_id})
    assert [q["id"] for q in listed.json()["data"]] == [str(game["question"].id)]
