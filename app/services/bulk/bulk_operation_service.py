from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.bulk_operation import BulkOperation
from app.schemas.bulk import BulkOperationCreate, BulkOperationUpdate
from app.utils.enums import BulkOperationStatus, BulkOperationType

LIST_LIMIT = 50


async def list_operations(
    db: AsyncSession,
    op_type: Optional[BulkOperationType] = None,
    op_status: Optional[BulkOperationStatus] = None,
) -> List[BulkOperation]:
    stmt = select(BulkOperation).order_by(BulkOperation.started_at.desc()).limit(LIST_LIMIT)
    if op_type is not None:
        stmt = stmt.where(BulkOperation.type == op_type)
    if op_status is not None:
        stmt = stmt.where(BulkOperation.status == op_status)
    return list((await db.execute(stmt)).scalars().all())


async def get_operation(db: AsyncSession, operation_id: uuid.UUID) -> BulkOperation:
    operation = await db.get(BulkOperation, operation_id)
    if operation is None:
        raise NotFoundError("Bulk operation not found")
    return operation


async def create_operation(
    db: AsyncSession, payload: BulkOperationCreate, initiated_by: Optional[uuid.UUID]
) -> BulkOperation:
    operation = BulkOperation(
        type=payload.type,
        status=BulkOperationStatus.pending,
        total_items=payload.total_items,
        filename=payload.filename,
        initiated_by=initiated_by,
    )
    db.add(operation)
    await db.commit()
    await db.refresh(operation)
    return operation


async def update_operation(
    db: AsyncSession, operation_id: uuid.UUID, payload: BulkOperationUpdate
) -> BulkOperation:
    operation = await get_operation(db, operation_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    new_status = changes.pop("status", None)
    for field, value in changes.items():
        setattr(operation, field, value)
    if new_status is not None:
        operation.mark_finished(new_status)
    await db.commit()
    await db.refresh(operation)
    return operation
