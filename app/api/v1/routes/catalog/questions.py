# app/api/v1/routes/catalog/questions.py

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.routes.auth.auth import get_current_user
from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.models.user import User
from app.schemas.questions import QuestionCreate, QuestionUpdate
from app.services.catalog.question_service import QuestionService
from app.utils.enums import Role

router = APIRouter(prefix="/questions", tags=["questions"])

admin_only = require_roles(Role.admin)


@router.get("", response_model=ResponseModel)
async def list_questions(
    round_id: Optional[uuid.UUID] = Query(None),
    include_inactive: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = QuestionService(db)
    questions = await service.list_questions(round_id, include_inactive=include_inactive)
    return success_response(msg="Questions fetched", data=await service.describe(questions))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ResponseModel,
    dependencies=[Depends(admin_only)],
)
async def create_question(payload: QuestionCreate, db: AsyncSession = Depends(get_db)):
    service = QuestionService(db)
    question = await service.create_question(payload)
    [detail] = await service.describe([question])
    return success_response(
        msg="Question created", data=detail, status_code=status.HTTP_201_CREATED
    )


@router.get("/{question_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def get_question(question_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    service = QuestionService(db)
    [detail] = await service.describe([await service.get_question(question_id)])
    return success_response(msg="Question fetched", data=detail)


@router.put("/{question_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def update_question(
    question_id: uuid.UUID,
    payload: QuestionUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = QuestionService(db)
    question = await service.update_question(question_id, payload)
    [detail] = await service.describe([question])
    return success_response(msg="Question updated", data=detail)


@router.delete("/{question_id}", response_model=ResponseModel, dependencies=[Depends(admin_only)])
async def delete_question(question_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await QuestionService(db).deactivate_question(question_id)
    return success_response(msg="Question deactivated successfully")
