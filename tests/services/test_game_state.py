from __future__ import annotations

import pytest
from sqlalchemy import select

from app.core.exceptions import ConflictError, NoRoundsFoundError, RoundNotActiveError, ValidationError
from app.models.round import Round
from app.schemas.game import GameSessionCreate, GameSessionUpdate, RoundCreate
from app.services.game.round_service import RoundService
from app.services.game.session_service import GameSessionService
from app.utils.enums import RoundStatus, RoundType

pytestmark = pytest.mark.asyncio


async def _session_with_rounds(db_session, count: int = 3):
    game_session = await GameSessionService(db_session).create_session(
        GameSessionCreate(name="Spring Cohort", max_rounds=count)
    )
    rounds = RoundService(db_session)
    created = []
    for number in range(1, count + 1):
        created.append(
            await rounds.create_round(
                RoundCreate(
                    game_session_id=game_session.id,
                    round_number=number,
                    type=RoundType.individual,
                    title=f"Round {number}",
                )
            )
        )
    return game_session, created


async def _active_round_ids(db_session, session_id):
    result = await db_session.execute(
        select(Round.id).where(Round.game_session_id == session_id, Round.is_active.is_(True))
    )
    return [row[0] for row in result.all()]


async def test_create_session_requires_a_name(db_session):
    with pytest.raises(ValidationError):
        await GameSessionService(db_session).create_session(GameSessionCreate(name="   "))


async def test_create_session_defaults_max_rounds(db_session):
    game_session = await GameSessionService(db_session).create_session(
        GameSessionCreate(name="Solo")
    )
    assert game_session.max_rounds == 1
    assert game_session.is_active is False


async def test_start_session_activates_round_one(db_session):
    game_session, rounds = await _session_with_rounds(db_session)

    started = await GameSessionService(db_session).start_session(game_session.id)

    assert started.is_active is True
    assert started.started_at is not None
    assert started.current_round_id == rounds[0].id
    assert await _active_round_ids(db_session, game_session.id) == [rounds[0].id]
    assert started.current_round.status == RoundStatus.active


async def test_start_session_without_round_one_fails(db_session):
    game_session = await GameSessionService(db_session).create_session(
        GameSessionCreate(name="Empty")
    )
    session_id = game_session.id

    with pytest.raises(NoRoundsFoundError):
        await GameSessionService(db_session).start_session(session_id)

    reloaded = await GameSessionService(db_session).get_session(session_id, refresh=True)
    assert reloaded.is_active is False


async def test_activate_round_leaves_exactly_one_active(db_session):
    game_session, rounds = await _session_with_rounds(db_session)
    service = RoundService(db_session)

    await service.activate_round(rounds[0].id)
    await service.activate_round(rounds[2].id)

    assert await _active_round_ids(db_session, game_session.id) == [rounds[2].id]
    await db_session.refresh(rounds[0])
    await db_session.refresh(rounds[1])
    assert rounds[0].status == RoundStatus.ended
    assert rounds[0].ended_at is not None
    assert rounds[1].status == RoundStatus.pending

    reloaded = await GameSessionService(db_session).get_session(game_session.id, refresh=True)
    assert reloaded.current_round_id == rounds[2].id


async def test_reactivating_an_ended_round_clears_ended_at(db_session):
    _, rounds = await _session_with_rounds(db_session, count=2)
    service = RoundService(db_session)

    await service.activate_round(rounds[0].id)
    await service.activate_round(rounds[1].id)
    again = await service.activate_round(rounds[0].id)

    assert again.is_active is True
    assert again.ended_at is None


async def test_end_round_clears_current_round(db_session):
    game_session, rounds = await _session_with_rounds(db_session, count=1)
    service = RoundService(db_session)
    await service.activate_round(rounds[0].id)

    ended = await service.end_round(rounds[0].id)

    assert ended.status == RoundStatus.ended
    reloaded = await GameSessionService(db_session).get_session(game_session.id, refresh=True)
    assert reloaded.current_round_id is None


async def test_end_round_requires_an_active_round(db_session):
    _, rounds = await _session_with_rounds(db_session, count=1)

    with pytest.raises(RoundNotActiveError):
        await RoundService(db_session).end_round(rounds[0].id)


async def test_duplicate_round_number_conflicts(db_session):
    game_session, _ = await _session_with_rounds(db_session, count=1)

    with pytest.raises(ConflictError):
        await RoundService(db_session).create_round(
            RoundCreate(
                game_session_id=game_session.id,
                round_number=1,
                type=RoundType.group,
                title="Again",
            )
        )


async def test_update_session_toggle_stamps_timestamps(db_session):
    game_session, _ = await _session_with_rounds(db_session, count=1)
    service = GameSessionService(db_session)

    activated = await service.update_session(game_session.id, GameSessionUpdate(is_active=True))
    assert activated.started_at is not None

    stopped = await service.update_session(game_session.id, GameSessionUpdate(is_active=False))
    assert stopped.is_active is False
    assert stopped.ended_at is not None
    assert stopped.name == "Spring Cohort"


async def test_list_rounds_reports_counts(db_session):
    game_session, _ = await _session_with_rounds(db_session, count=2)

    summaries = await RoundService(db_session).list_rounds(game_session.id)

    assert [s.round_number for s in summaries] == [1, 2]
    assert all(s.question_count == 0 and s.submission_count == 0 for s in summaries)
