# app/api/v1/routes/bulk/bulk_operations.py

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.schemas.bulk import BulkOperationCreate, BulkOperationOut, BulkOperationUpdate
from app.services.bulk import bulk_operation_service
from app.utils.enums import BulkOperationStatus, BulkOperationType, Role

admin_only = require_roles(Role.admin)

router = APIRouter(
    prefix="/bulk-operations",
    tags=["bulk"],
    dependencies=[Depends(admin_only)],
)


@router.get("", response_model=ResponseModel)
async def list_bulk_operations(
    type: Optional[BulkOperationType] = Query(None),
    status_filter: Optional[BulkOperationStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    operations = await bulk_operation_service.list_operations(db, type, status_filter)
    return success_response(
        msg="Bulk operations fetched",
        data=[BulkOperationOut.model_validate(op) for op in operations],
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ResponseModel)
async def create_bulk_operation(
    payload: BulkOperationCreate,
    current_user: User = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    operation = await bulk_operation_service.create_operation(db, payload, current_user.id)
    return success_response(
        msg="Bulk operation created",
        data=BulkOperationOut.model_validate(operation),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{operation_id}", response_model=ResponseModel)
async def get_bulk_operation(operation_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    operation = await bulk_operation_service.get_operation(db, operation_id)
    return success_response(
        msg="Bulk operation fetched", data=BulkOperationOut.model_validate(operation)
    )


@router.put("/{operation_id}", response_model=ResponseModel)
async def update_bulk_operation(
    operation_id: uuid.UUID,
    payload: BulkOperationUpdate,
    db: AsyncSession = Depends(get_db),
):
    operation = await bulk_operation_service.update_operation(db, operation_id, payload)
    return success_response(
        msg="Bulk operation updated", data=BulkOperationOut.model_validate(operation)
    )
