from __future__ import annotations

import pytest
from sqlalchemy import func, select

from app.core.security import verify_password
from app.models.game_session import GameSession
from app.models.question import Question
from app.models.round import Round
from app.models.team import Team
from app.models.user import User
from app.scripts.seed_demo import DEMO_SESSION_NAME, seed_demo

pytestmark = pytest.mark.asyncio


async def test_seed_demo_builds_a_playable_game(db_session):
    assert await seed_demo(db_session) is True

    game_session = (
        await db_session.execute(select(GameSession).where(GameSession.name == DEMO_SESSION_NAME))
    ).scalar_one()
    rounds = (
        await db_session.execute(
            select(Round).where(Round.game_session_id == game_session.id).order_by(Round.round_number)
        )
    ).scalars().all()

    assert game_session.is_active is True
    assert [r.is_active for r in rounds] == [True, False, False]
    assert game_session.current_round_id == rounds[0].id
    assert await db_session.scalar(select(func.count(Question.id))) == 3

    teams = {t.name: t.total_score for t in (await db_session.execute(select(Team))).scalars()}
    assert teams == {"Alpha Team": 255, "Beta Team": 245, "Gamma Team": 261}

    leaders = (
        await db_session.execute(select(User.email).where(User.is_group_leader.is_(True)))
    ).scalars().all()
    assert sorted(leaders) == ["alice@example.com", "david@example.com", "grace@example.com"]

    alice = (
        await db_session.execute(select(User).where(User.email == "alice@example.com"))
    ).scalar_one()
    assert verify_password("student123", alice.password_hash)


async def test_seed_demo_runs_once(db_session):
    await seed_demo(db_session)

    assert await seed_demo(db_session) is False
    assert await db_session.scalar(select(func.count(GameSession.id))) == 1
