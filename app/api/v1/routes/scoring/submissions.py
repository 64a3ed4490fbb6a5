# app/api/v1/routes/scoring/submissions.py

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.routes.auth.auth import get_current_user
from app.core.response import ResponseModel, success_response
from app.db.deps import get_db
from app.models.user import User
from app.schemas.submissions import SubmissionCreate, SubmissionOut
from app.services.scoring import submission_service

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.get("", response_model=ResponseModel)
async def list_submissions(
    question_id: Optional[uuid.UUID] = Query(None),
    round_id: Optional[uuid.UUID] = Query(None),
    user_id: Optional[uuid.UUID] = Query(None),
    team_id: Optional[uuid.UUID] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    submissions = await submission_service.list_submissions(
        db,
        current_user,
        question_id=question_id,
        round_id=round_id,
        user_id=user_id,
        team_id=team_id,
    )
    return success_response(
        msg="Submissions fetched", data=[SubmissionOut.model_validate(s) for s in submissions]
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ResponseModel)
async def create_submission(
    payload: SubmissionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    submission = await submission_service.submit(db, current_user, payload)
    return success_response(
        msg="Answer submitted",
        data=SubmissionOut.model_validate(submission),
        status_code=status.HTTP_201_CREATED,
    )
