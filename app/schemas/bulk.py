from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.utils.enums import BulkOperationStatus, BulkOperationType


class ImportOptions(BaseModel):
    update_existing: bool = False


class UserImportRequest(BaseModel):
    # rows stay loosely typed here; each one is validated on its own so a bad
    # row fails alone instead of rejecting the whole batch
    users: List[Dict[str, Any]]
    options: ImportOptions = Field(default_factory=ImportOptions)


class ImportRowError(BaseModel):
    email: str
    error: str


class UserImportResult(BaseModel):
    success: bool = True
    processed: int
    failed: int
    errors: List[ImportRowError]
    operation_id: UUID


class BulkOperationCreate(BaseModel):
    type: BulkOperationType
    total_items: int = Field(0, ge=0)
    filename: Optional[str] = None


class BulkOperationUpdate(BaseModel):
    status: Optional[BulkOperationStatus] = None
    processed_items: Optional[int] = Field(None, ge=0)
    failed_items: Optional[int] = Field(None, ge=0)
    result_data: Optional[Dict[str, Any]] = None


class BulkOperationOut(BaseModel):
    id: UUID
    type: BulkOperationType
    status: BulkOperationStatus
    total_items: int
    processed_items: int
    failed_items: int
    filename: Optional[str] = None
    initiated_by: Optional[UUID] = None
    result_data: Optional[Dict[str, Any]] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
