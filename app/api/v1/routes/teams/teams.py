# app/api/v1/routes/teams/teams.py

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.v1.routes.auth.auth import get_current_user
from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging_config import get_logger
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.team import Team
from app.models.user import User
from app.schemas.teams import TeamCreate, TeamUpdate
from app.services.reporting.leaderboard_service import team_with_active_members
from app.utils.enums import Role

router = APIRouter(prefix="/teams", tags=["teams"])

logger = get_logger("routes.teams")

admin_only = require_roles(Role.admin)


async def _load_team(db: AsyncSession, team_id: uuid.UUID, refresh: bool = False) -> Team:
    stmt = select(Team).options(selectinload(Team.members)).where(Team.id == team_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    team = (await db.execute(stmt)).scalars().first()
    if team is None:
        raise NotFoundError("Team not found")
    return team


async def _ensure_name_free(db: AsyncSession, name: str):
    taken = await db.execute(select(Team.id).where(Team.name == name))
    if taken.first() is not None:
        raise ConflictError("Team with this name already exists")


@router.get("", response_model=ResponseModel)
async def list_teams(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(Team).options(selectinload(Team.members)).order_by(Team.total_score.desc())
    )
    teams = [team_with_active_members(t) for t in result.scalars().all()]
    return success_response(msg="Teams fetched", data=teams)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def create_team(payload: TeamCreate, db: AsyncSession = Depends(get_db)):
    await _ensure_name_free(db, payload.name)
    team = Team(name=payload.name, game_session_id=payload.game_session_id)
    db.add(team)
    await db.commit()
    logger.info(f"Created team {team.id} ({team.name})")

    team = await _load_team(db, team.id)
    return success_response(
        msg="Team created",
        data=team_with_active_members(team),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{team_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def get_team(team_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    team = await _load_team(db, team_id)
    return success_response(msg="Team fetched", data=team_with_active_members(team))


@router.put("/{team_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def update_team(
    team_id: uuid.UUID,
    payload: TeamUpdate,
    db: AsyncSession = Depends(get_db),
):
    team = await _load_team(db, team_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") and changes["name"] != team.name:
        await _ensure_name_free(db, changes["name"])

    for field, value in changes.items():
        if value is None and field != "game_session_id":
            continue
        setattr(team, field, value)

    await db.commit()
    team = await _load_team(db, team_id, refresh=True)
    return success_response(msg="Team updated", data=team_with_active_members(team))


@router.delete("/{team_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def delete_team(team_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    team = await _load_team(db, team_id)
    try:
        await db.execute(
            update(User)
            .where(User.team_id == team_id)
            .values(team_id=None, is_group_leader=False)
        )
        await db.delete(team)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(f"Deleted team {team_id} and un-assigned its members")
    return success_response(msg="Team deleted successfully")
