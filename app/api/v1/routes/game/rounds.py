# app/api/v1/routes/game/rounds.py

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.routes.auth.auth import get_current_user
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.schemas.game import RoundCreate, RoundOut
from app.services.game.round_service import RoundService
from app.utils.enums import Role

router = APIRouter(prefix="/rounds", tags=["rounds"])

admin_only = require_roles(Role.admin)


@router.get("", response_model=ResponseModel)
async def list_rounds(
    game_session_id: Optional[uuid.UUID] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rounds = await RoundService(db).list_rounds(game_session_id)
    return success_response(msg="Rounds fetched", data=rounds)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def create_round(payload: RoundCreate, db: AsyncSession = Depends(get_db)):
    round_ = await RoundService(db).create_round(payload)
    return success_response(
        msg="Round created",
        data=RoundOut.model_validate(round_),
        status_code=status.HTTP_201_CREATED,
    )


@router.post(
    "/{round_id}/activate",
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def activate_round(round_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    round_ = await RoundService(db).activate_round(round_id)
    return success_response(msg="Round activated", data=RoundOut.model_validate(round_))


@router.post(
    "/{round_id}/end",
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def end_round(round_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    round_ = await RoundService(db).end_round(round_id)
    return success_response(msg="Round ended", data=RoundOut.model_validate(round_))
