from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubmissionCreate(BaseModel):
    # Required-ness is enforced by SubmissionService so a missing field surfaces
    # as MISSING_FIELDS rather than a schema error.
    question_id: Optional[str] = None
    selected_options: Optional[List[str]] = None
    reasoning: Optional[str] = None
    is_group_submission: bool = False
    is_individual_phase: bool = False

    @field_validator("question_id", mode="before")
    def _stringify_question_id(cls, value: Any) -> Any:
        # ids that are not UUIDs are reported as QUESTION_NOT_FOUND by the service
        return None if value is None else str(value)

    @field_validator("selected_options", mode="before")
    def _wrap_single_option(cls, value: Any) -> Any:
        # a single option id is accepted for multiple-choice questions
        if value is None or isinstance(value, list):
            return value
        return [value]


class SubmissionOut(BaseModel):
    id: UUID
    user_id: UUID
    question_id: UUID
    round_id: UUID
    team_id: Optional[UUID] = None
    selected_options: List[str] = Field(default_factory=list)
    reasoning: str
    points: int
    is_group_submission: bool
    is_individual_phase: bool
    submitted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
