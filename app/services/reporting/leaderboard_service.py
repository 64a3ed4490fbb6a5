from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.team import Team
from app.models.user import User
from app.schemas.teams import TeamWithMembersOut
from app.schemas.users import MemberOut, UserWithTeamOut
from app.utils.enums import LeaderboardType, Role

INDIVIDUAL_LIMIT = 50
TEAM_LIMIT = 20


async def individual_leaderboard(db: AsyncSession, limit: int = INDIVIDUAL_LIMIT) -> List[UserWithTeamOut]:
    result = await db.execute(
        select(User)
        .options(selectinload(User.team))
        .where(User.role == Role.student, User.is_active.is_(True))
        .order_by(User.individual_score.desc(), User.name.asc())
        .limit(limit)
    )
    return [UserWithTeamOut.model_validate(u) for u in result.scalars().all()]


def team_with_active_members(team: Team) -> TeamWithMembersOut:
    members = [MemberOut.model_validate(m) for m in team.members if m.is_active]
    return TeamWithMembersOut.model_validate(team).model_copy(
        update={"members": members, "member_count": len(members)}
    )


async def team_leaderboard(db: AsyncSession, limit: int = TEAM_LIMIT) -> List[TeamWithMembersOut]:
    result = await db.execute(
        select(Team)
        .options(selectinload(Team.members))
        .where(Team.is_active.is_(True))
        .order_by(Team.total_score.desc(), Team.name.asc())
        .limit(limit)
    )
    return [team_with_active_members(t) for t in result.scalars().all()]


async def build_leaderboard(db: AsyncSession, board: LeaderboardType) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if board in (LeaderboardType.individual, LeaderboardType.both):
        data["individual"] = await individual_leaderboard(db)
    if board in (LeaderboardType.team, LeaderboardType.both):
        data["team"] = await team_leaderboard(db)
    return data
