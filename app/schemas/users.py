from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from app.utils.enums import Role


NameStr = Annotated[str, StringConstraints(min_length=1, max_length=120, strip_whitespace=True)]
PasswordStr = Annotated[str, StringConstraints(min_length=6, max_length=128)]


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    return email.strip().lower()


class UserCreate(BaseModel):
    name: NameStr
    email: EmailStr
    password: PasswordStr
    role: Role = Role.student
    team_id: Optional[UUID] = None
    is_group_leader: bool = False

    @field_validator("email", mode="before")
    def _normalize_email(cls, email: str) -> str:
        return normalize_email(email)


class UserUpdate(BaseModel):
    """Partial update; only fields present in the body are applied."""

    name: Optional[NameStr] = None
    email: Optional[EmailStr] = None
    password: Optional[PasswordStr] = None
    role: Optional[Role] = None
    team_id: Optional[UUID] = None
    is_group_leader: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("email", mode="before")
    def _normalize_email(cls, email: Optional[str]) -> Optional[str]:
        return normalize_email(email)


class TeamRef(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserOut(BaseModel):
    id: UUID
    name: Optional[str] = None
    email: str
    role: Role
    team_id: Optional[UUID] = None
    is_group_leader: bool
    individual_score: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserWithTeamOut(UserOut):
    team: Optional[TeamRef] = None


class UserDetailOut(UserWithTeamOut):
    submission_count: int = 0
    total_submission_points: int = 0


class MemberOut(BaseModel):
    id: UUID
    name: Optional[str] = None
    email: str
    is_group_leader: bool
    individual_score: int

    model_config = ConfigDict(from_attributes=True)


class UserImportRecord(BaseModel):
    """One row of a bulk user import."""

    name: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role = Role.student
    team_name: Optional[str] = None

    @field_validator("email", mode="before")
    def _normalize_email(cls, email: Optional[str]) -> Optional[str]:
        return normalize_email(email)

    @field_validator("role", mode="before")
    def _normalize_role(cls, role):
        if isinstance(role, str):
            return role.strip().lower()
        return role
