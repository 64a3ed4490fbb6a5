from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints

from app.schemas.users import MemberOut


TeamNameStr = Annotated[str, StringConstraints(min_length=1, max_length=120, strip_whitespace=True)]


class TeamCreate(BaseModel):
    name: TeamNameStr
    game_session_id: Optional[UUID] = None


class TeamUpdate(BaseModel):
    name: Optional[TeamNameStr] = None
    game_session_id: Optional[UUID] = None
    total_score: Optional[int] = None
    is_active: Optional[bool] = None


class TeamOut(BaseModel):
    id: UUID
    name: str
    game_session_id: Optional[UUID] = None
    total_score: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TeamWithMembersOut(TeamOut):
    members: List[MemberOut] = []
    member_count: int = 0
