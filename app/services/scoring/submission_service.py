"""Submission intake and scoring.

A submission is validated in a fixed order (fields, question, reasoning length,
round state, group permission), scored against the question's options and
stored together with the score increment in a single transaction.
"""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import (
    ForbiddenError,
    MissingFieldsError,
    QuestionNotFoundError,
    ReasoningTooShortError,
    RoundNotActiveError,
)
from app.core.logging_config import get_logger
from app.models.question import Question
from app.models.submission import Submission
from app.models.team import Team
from app.models.user import User
from app.schemas.submissions import SubmissionCreate
from app.utils.enums import Role, RoundType

logger = get_logger("services.submissions")


def count_words(text: str) -> int:
    return len(text.split())


def score_selection(question: Question, selected_options: List[str]) -> int:
    """Sum the points of the options picked; ids that match nothing add 0."""
    chosen = set(selected_options)
    return sum(opt.points for opt in question.options if str(opt.id) in chosen)


async def submit(db: AsyncSession, user: User, payload: SubmissionCreate) -> Submission:
    # an empty selection is allowed and scores 0
    if not payload.question_id or payload.selected_options is None or not payload.reasoning:
        raise MissingFieldsError()

    try:
        question_id = uuid.UUID(payload.question_id)
    except ValueError:
        raise QuestionNotFoundError()

    question = (
        await db.execute(
            select(Question)
            .options(selectinload(Question.options), selectinload(Question.round))
            .where(Question.id == question_id)
        )
    ).scalars().first()
    if question is None:
        raise QuestionNotFoundError()

    word_count = count_words(payload.reasoning)
    if word_count < question.min_reasoning_words:
        raise ReasoningTooShortError(question.min_reasoning_words, word_count)

    round_ = question.round
    if round_ is None or not round_.is_active:
        raise RoundNotActiveError()

    if (
        round_.type == RoundType.group
        and payload.is_group_submission
        and not user.is_group_leader
    ):
        raise ForbiddenError("Only group leaders can submit group answers")

    selected = [str(option_id) for option_id in payload.selected_options]
    points = score_selection(question, selected)

    submission = Submission(
        user_id=user.id,
        question_id=question.id,
        round_id=round_.id,
        team_id=user.team_id,
        selected_options=selected,
        reasoning=payload.reasoning,
        points=points,
        is_group_submission=payload.is_group_submission,
        is_individual_phase=payload.is_individual_phase,
    )
    try:
        db.add(submission)
        if payload.is_group_submission and user.team_id is not None:
            await db.execute(
                update(Team)
                .where(Team.id == user.team_id)
                .values(total_score=Team.total_score + points)
            )
        else:
            await db.execute(
                update(User)
                .where(User.id == user.id)
                .values(individual_score=User.individual_score + points)
            )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(submission)
    logger.info(
        f"User {user.id} submitted question {question.id} for {points} points"
        f"{' (group)' if payload.is_group_submission else ''}"
    )
    return submission


async def list_submissions(
    db: AsyncSession,
    current_user: User,
    *,
    question_id: Optional[uuid.UUID] = None,
    round_id: Optional[uuid.UUID] = None,
    user_id: Optional[uuid.UUID] = None,
    team_id: Optional[uuid.UUID] = None,
) -> List[Submission]:
    stmt = select(Submission).order_by(Submission.submitted_at.desc())
    if current_user.role != Role.admin:
        stmt = stmt.where(Submission.user_id == current_user.id)
    elif user_id is not None:
        stmt = stmt.where(Submission.user_id == user_id)
    if question_id is not None:
        stmt = stmt.where(Submission.question_id == question_id)
    if round_id is not None:
        stmt = stmt.where(Submission.round_id == round_id)
    if team_id is not None:
        stmt = stmt.where(Submission.team_id == team_id)
    return list((await db.execute(stmt)).scalars().all())
