"""Questions and their answer options.

Option updates are applied as a diff against the stored rows so option ids
stay stable for submissions that already reference them.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.models.case_file import CaseFile
from app.models.question import Question, QuestionCategory, QuestionOption, QuestionTag
from app.models.round import Round
from app.models.submission import Submission
from app.schemas.questions import OptionIn, QuestionCreate, QuestionDetailOut, QuestionUpdate

logger = get_logger("services.questions")

_LOAD_OPTIONS = (
    selectinload(Question.options),
    selectinload(Question.tags),
    selectinload(Question.category),
)


def apply_option_diff(question: Question, incoming: List[OptionIn]) -> None:
    """Update matching options in place, add new ones and drop the rest.

    Unknown ids (not belonging to this question) are treated as new options.
    """
    existing: Dict[uuid.UUID, QuestionOption] = {opt.id: opt for opt in question.options}
    kept: List[QuestionOption] = []

    for index, item in enumerate(incoming):
        order = item.order if item.order is not None else index
        current = existing.pop(item.id, None) if item.id is not None else None
        if current is None:
            current = QuestionOption(
                text=item.text, points=item.points, is_correct=item.is_correct, order=order
            )
        else:
            current.text = item.text
            current.points = item.points
            current.is_correct = item.is_correct
            current.order = order
        kept.append(current)

    # delete-orphan cascade removes whatever is left in ``existing``
    question.options = kept


class QuestionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_questions(
        self, round_id: Optional[uuid.UUID] = None, include_inactive: bool = False
    ) -> List[Question]:
        stmt = select(Question).options(*_LOAD_OPTIONS).order_by(
            Question.round_id, Question.order, Question.created_at
        )
        if round_id is not None:
            stmt = stmt.where(Question.round_id == round_id)
        if not include_inactive:
            stmt = stmt.where(Question.is_active.is_(True))
        return list((await self.db.execute(stmt)).scalars().all())

    async def get_question(self, question_id: uuid.UUID, *, refresh: bool = False) -> Question:
        stmt = select(Question).options(*_LOAD_OPTIONS).where(Question.id == question_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        question = (await self.db.execute(stmt)).scalars().first()
        if question is None:
            raise NotFoundError("Question not found")
        return question

    async def describe(self, questions: List[Question]) -> List[QuestionDetailOut]:
        """Attach submission counts; an inactive category reads as uncategorized."""
        ids = [q.id for q in questions]
        counts: Dict[uuid.UUID, int] = {}
        if ids:
            rows = await self.db.execute(
                select(Submission.question_id, func.count(Submission.id))
                .where(Submission.question_id.in_(ids))
                .group_by(Submission.question_id)
            )
            counts = dict(rows.all())

        details = []
        for question in questions:
            detail = QuestionDetailOut.model_validate(question)
            category = detail.category if question.category and question.category.is_active else None
            details.append(
                detail.model_copy(
                    update={"category": category, "submission_count": counts.get(question.id, 0)}
                )
            )
        return details

    async def _load_tags(self, tag_ids: List[uuid.UUID]) -> List[QuestionTag]:
        if not tag_ids:
            return []
        result = await self.db.execute(select(QuestionTag).where(QuestionTag.id.in_(tag_ids)))
        tags = list(result.scalars().all())
        missing = set(tag_ids) - {t.id for t in tags}
        if missing:
            raise ValidationError(f"Unknown tag ids: {', '.join(sorted(str(m) for m in missing))}")
        return tags

    async def _check_category(self, category_id: Optional[uuid.UUID]) -> None:
        if category_id is not None and await self.db.get(QuestionCategory, category_id) is None:
            raise ValidationError("Question category not found")

    async def _check_case_file(self, case_file_id: Optional[uuid.UUID]) -> None:
        if case_file_id is not None and await self.db.get(CaseFile, case_file_id) is None:
            raise ValidationError("Case file not found")

    async def create_question(self, payload: QuestionCreate) -> Question:
        if await self.db.get(Round, payload.round_id) is None:
            raise NotFoundError("Round not found")
        await self._check_category(payload.category_id)
        await self._check_case_file(payload.case_file_id)

        question = Question(
            round_id=payload.round_id,
            title=payload.title,
            description=payload.description,
            case_file_url=payload.case_file_url,
            case_file_id=payload.case_file_id,
            category_id=payload.category_id,
            question_type=payload.question_type,
            min_reasoning_words=(
                payload.min_reasoning_words
                if payload.min_reasoning_words is not None
                else settings.DEFAULT_MIN_REASONING_WORDS
            ),
            order=payload.order,
            options=[
                QuestionOption(
                    text=opt.text,
                    points=opt.points,
                    is_correct=opt.is_correct,
                    order=opt.order if opt.order is not None else index,
                )
                for index, opt in enumerate(payload.options)
            ],
            tags=await self._load_tags(payload.tag_ids),
        )
        try:
            self.db.add(question)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(f"Created question {question.id} with {len(payload.options)} options")
        return await self.get_question(question.id, refresh=True)

    async def update_question(self, question_id: uuid.UUID, payload: QuestionUpdate) -> Question:
        try:
            question = await self.get_question(question_id)
            changes = payload.model_dump(exclude_unset=True, exclude={"options", "tag_ids"})
            if "category_id" in changes:
                await self._check_category(changes["category_id"])
            if "case_file_id" in changes:
                await self._check_case_file(changes["case_file_id"])
            for field, value in changes.items():
                if value is None and field not in ("case_file_url", "case_file_id", "category_id"):
                    continue
                setattr(question, field, value)

            if payload.options is not None:
                apply_option_diff(question, payload.options)
            if payload.tag_ids is not None:
                question.tags = await self._load_tags(payload.tag_ids)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return await self.get_question(question_id, refresh=True)

    async def deactivate_question(self, question_id: uuid.UUID) -> None:
        question = await self.get_question(question_id)
        question.is_active = False
        await self.db.commit()
        logger.info(f"Deactivated question {question_id}")
