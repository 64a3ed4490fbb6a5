from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from app.utils.enums import QuestionType


StrippedStr = Annotated[str, StringConstraints(min_length=1, strip_whitespace=True)]
ColorStr = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]


class OptionIn(BaseModel):
    """An answer option; ``id`` identifies an existing option to update in place."""

    id: Optional[UUID] = None
    text: StrippedStr
    points: int = 0
    is_correct: bool = False
    order: Optional[int] = None


class OptionOut(BaseModel):
    id: UUID
    text: str
    points: int
    is_correct: bool
    order: int

    model_config = ConfigDict(from_attributes=True)


class QuestionCreate(BaseModel):
    round_id: UUID
    title: StrippedStr
    description: StrippedStr
    case_file_url: Optional[str] = None
    case_file_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    tag_ids: List[UUID] = Field(default_factory=list)
    question_type: QuestionType = QuestionType.multiple_choice
    min_reasoning_words: Optional[int] = Field(None, ge=0)
    order: int = 0
    options: List[OptionIn] = Field(default_factory=list)


class QuestionUpdate(BaseModel):
    title: Optional[StrippedStr] = None
    description: Optional[StrippedStr] = None
    case_file_url: Optional[str] = None
    case_file_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    tag_ids: Optional[List[UUID]] = None
    question_type: Optional[QuestionType] = None
    min_reasoning_words: Optional[int] = Field(None, ge=0)
    order: Optional[int] = None
    is_active: Optional[bool] = None
    options: Optional[List[OptionIn]] = None


class CategoryRef(BaseModel):
    id: UUID
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class TagRef(BaseModel):
    id: UUID
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class QuestionOut(BaseModel):
    id: UUID
    round_id: UUID
    title: str
    description: str
    case_file_url: Optional[str] = None
    case_file_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    question_type: QuestionType
    min_reasoning_words: int
    order: int
    is_active: bool
    options: List[OptionOut] = []
    tags: List[TagRef] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class QuestionDetailOut(QuestionOut):
    category: Optional[CategoryRef] = None
    submission_count: int = 0


class CategoryCreate(BaseModel):
    name: StrippedStr
    description: Optional[str] = None
    color: ColorStr = "#3B82F6"


class CategoryUpdate(BaseModel):
    name: Optional[StrippedStr] = None
    description: Optional[str] = None
    color: Optional[ColorStr] = None
    is_active: Optional[bool] = None


class CategoryOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    color: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryWithCountOut(CategoryOut):
    question_count: int = 0


class TagCreate(BaseModel):
    name: StrippedStr
    description: Optional[str] = None
    color: ColorStr = "#10B981"


class TagOut(CategoryOut):
    question_count: int = 0
