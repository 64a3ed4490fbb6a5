# app/api/v1/routes/reporting/reporting.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.routes.auth.auth import get_current_user
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.services.reporting import analytics_service, leaderboard_service
from app.utils.enums import LeaderboardType, Role

leaderboards_router = APIRouter(prefix="/leaderboards", tags=["leaderboards"])
analytics_router = APIRouter(prefix="/analytics", tags=["analytics"])


@leaderboards_router.get("", response_model=ResponseModel)
async def get_leaderboards(
    type: LeaderboardType = Query(LeaderboardType.both),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = await leaderboard_service.build_leaderboard(db, type)
    return success_response(msg="Leaderboards fetched", data=data)


@analytics_router.get(
    "/dashboard",
    response_model=ResponseModel,
    dependencies=[Depends(require_roles(Role.admin))],
)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    return success_response(
        msg="Dashboard analytics fetched",
        data=await analytics_service.build_dashboard(db),
    )
