from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.logging_config import get_logger
from app.models.case_file import CaseFile
from app.schemas.case_files import CaseFileCreate, CaseFileUpdate

logger = get_logger("services.case_files")


async def list_case_files(db: AsyncSession) -> List[CaseFile]:
    result = await db.execute(
        select(CaseFile).where(CaseFile.is_active.is_(True)).order_by(CaseFile.created_at.desc())
    )
    return list(result.scalars().all())


async def get_case_file(db: AsyncSession, case_file_id: uuid.UUID) -> CaseFile:
    case_file = await db.get(CaseFile, case_file_id)
    if case_file is None:
        raise NotFoundError("Case file not found")
    return case_file


async def create_case_file(
    db: AsyncSession, payload: CaseFileCreate, uploaded_by: Optional[uuid.UUID]
) -> CaseFile:
    case_file = CaseFile(**payload.model_dump(), uploaded_by=uploaded_by)
    db.add(case_file)
    await db.commit()
    await db.refresh(case_file)
    logger.info(f"Registered case file {case_file.id} ({case_file.original_name})")
    return case_file


async def update_case_file(
    db: AsyncSession, case_file_id: uuid.UUID, payload: CaseFileUpdate
) -> CaseFile:
    case_file = await get_case_file(db, case_file_id)
    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(case_file, field, value)
    await db.commit()
    await db.refresh(case_file)
    return case_file


async def deactivate_case_file(db: AsyncSession, case_file_id: uuid.UUID) -> None:
    case_file = await get_case_file(db, case_file_id)
    case_file.is_active = False
    await db.commit()
