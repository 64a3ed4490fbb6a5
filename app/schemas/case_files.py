from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


RequiredStr = Annotated[str, StringConstraints(min_length=1, strip_whitespace=True)]


class CaseFileCreate(BaseModel):
    """Registers a file that was already written to storage."""

    filename: RequiredStr
    original_name: RequiredStr
    filepath: RequiredStr
    url: RequiredStr
    filesize: int = Field(0, ge=0)
    mime_type: str = "application/octet-stream"
    description: Optional[str] = None


class CaseFileUpdate(BaseModel):
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CaseFileOut(BaseModel):
    id: UUID
    filename: str
    original_name: str
    filesize: int
    mime_type: str
    url: str
    description: Optional[str] = None
    uploaded_by: Optional[UUID] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StoredFileOut(BaseModel):
    filename: str
    url: str
    size: int
    type: Optional[str] = None
