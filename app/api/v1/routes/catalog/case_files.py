# app/api/v1/routes/catalog/case_files.py

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.schemas.case_files import CaseFileCreate, CaseFileOut, CaseFileUpdate
from app.services.catalog import case_file_service
from app.utils.enums import Role

router = APIRouter(prefix="/case-files", tags=["case-files"])

admin_only = require_roles(Role.admin)


@router.get("", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def list_case_files(db: AsyncSession = Depends(get_db)):
    case_files = await case_file_service.list_case_files(db)
    return success_response(
        msg="Case files fetched", data=[CaseFileOut.model_validate(c) for c in case_files]
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ResponseModel)
async def create_case_file(
    payload: CaseFileCreate,
    current_user: User = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    case_file = await case_file_service.create_case_file(db, payload, current_user.id)
    return success_response(
        msg="Case file created",
        data=CaseFileOut.model_validate(case_file),
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{case_file_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def update_case_file(
    case_file_id: uuid.UUID,
    payload: CaseFileUpdate,
    db: AsyncSession = Depends(get_db),
):
    case_file = await case_file_service.update_case_file(db, case_file_id, payload)
    return success_response(msg="Case file updated", data=CaseFileOut.model_validate(case_file))


@router.delete("/{case_file_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def delete_case_file(case_file_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await case_file_service.deactivate_case_file(db, case_file_id)
    return success_response(msg="Case file deactivated successfully")
