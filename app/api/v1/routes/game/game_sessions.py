# app/api/v1/routes/game/game_sessions.py

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.routes.auth.auth import get_current_user
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.game_session import GameSession
from app.models.user import User
from app.schemas.game import GameSessionCreate, GameSessionDetailOut, GameSessionUpdate
from app.schemas.teams import TeamOut
from app.services.game.round_service import count_by_round, summarize_rounds
from app.services.game.session_service import GameSessionService
from app.utils.enums import Role

router = APIRouter(prefix="/game-sessions", tags=["game-sessions"])

admin_only = require_roles(Role.admin)


async def _detail(db: AsyncSession, game_session: GameSession, counts=None) -> GameSessionDetailOut:
    if counts is None:
        counts = await count_by_round(db, [r.id for r in game_session.rounds])
    return GameSessionDetailOut.model_validate(game_session).model_copy(
        update={
            "rounds": summarize_rounds(list(game_session.rounds), counts),
            "teams": [TeamOut.model_validate(t) for t in game_session.teams],
        }
    )


@router.get("", response_model=ResponseModel)
async def list_game_sessions(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    sessions = await GameSessionService(db).list_sessions()
    counts = await count_by_round(db, [r.id for s in sessions for r in s.rounds])
    data = [await _detail(db, s, counts) for s in sessions]
    return success_response(msg="Game sessions fetched", data=data)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def create_game_session(payload: GameSessionCreate, db: AsyncSession = Depends(get_db)):
    game_session = await GameSessionService(db).create_session(payload)
    return success_response(
        msg="Game session created",
        data=await _detail(db, game_session),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{session_id}", response_model=ResponseModel)
async def get_game_session(
    session_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    game_session = await GameSessionService(db).get_session(session_id)
    return success_response(msg="Game session fetched", data=await _detail(db, game_session))


@router.put("/{session_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def update_game_session(
    session_id: uuid.UUID,
    payload: GameSessionUpdate,
    db: AsyncSession = Depends(get_db),
):
    game_session = await GameSessionService(db).update_session(session_id, payload)
    return success_response(msg="Game session updated", data=await _detail(db, game_session))


@router.post(
    "/{session_id}/start",
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def start_game_session(session_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    game_session = await GameSessionService(db).start_session(session_id)
    return success_response(msg="Game session started", data=await _detail(db, game_session))
