from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from app.schemas.teams import TeamOut
from app.utils.enums import RoundStatus, RoundType


TitleStr = Annotated[str, StringConstraints(min_length=1, max_length=200, strip_whitespace=True)]


class GameSessionCreate(BaseModel):
    # emptiness is checked by the service so the error carries its own message
    name: str = ""
    description: Optional[str] = None
    max_rounds: Optional[int] = Field(None, ge=1)


class GameSessionUpdate(BaseModel):
    name: Optional[TitleStr] = None
    description: Optional[str] = None
    max_rounds: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None
    current_round_id: Optional[UUID] = None


class RoundCreate(BaseModel):
    game_session_id: UUID
    round_number: int = Field(..., ge=1)
    type: RoundType
    title: TitleStr
    description: Optional[str] = None
    time_limit: Optional[int] = Field(None, ge=1, description="Minutes; shown as a countdown only")


class RoundOut(BaseModel):
    id: UUID
    game_session_id: UUID
    round_number: int
    type: RoundType
    title: str
    description: Optional[str] = None
    time_limit: Optional[int] = None
    is_active: bool
    status: RoundStatus
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoundSummaryOut(RoundOut):
    question_count: int = 0
    submission_count: int = 0


class GameSessionOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    max_rounds: int
    is_active: bool
    current_round_id: Optional[UUID] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GameSessionDetailOut(GameSessionOut):
    rounds: List[RoundSummaryOut] = []
    teams: List[TeamOut] = []
    current_round: Optional[RoundOut] = None
