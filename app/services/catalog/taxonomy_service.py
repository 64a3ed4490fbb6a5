from __future__ import annotations

import uuid
from typing import List, Type, Union

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging_config import get_logger
from app.models.question import Question, QuestionCategory, QuestionTag, question_tag_links
from app.schemas.questions import (
    CategoryCreate,
    CategoryUpdate,
    CategoryWithCountOut,
    TagCreate,
    TagOut,
)

logger = get_logger("services.taxonomy")

Taxon = Union[QuestionCategory, QuestionTag]


async def _ensure_unique_name(db: AsyncSession, model: Type[Taxon], name: str, label: str):
    existing = await db.execute(select(model.id).where(func.lower(model.name) == name.lower()))
    if existing.first() is not None:
        raise ConflictError(f"{label} with this name already exists")


async def _commit_unique(db: AsyncSession, label: str) -> None:
    # concurrent creates can still race past the pre-check
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(f"{label} with this name already exists")


# -- categories ---------------------------------------------------------------

async def list_categories(db: AsyncSession) -> List[CategoryWithCountOut]:
    counts = (
        select(Question.category_id, func.count(Question.id).label("question_count"))
        .where(Question.is_active.is_(True))
        .group_by(Question.category_id)
        .subquery()
    )
    rows = await db.execute(
        select(QuestionCategory, func.coalesce(counts.c.question_count, 0))
        .outerjoin(counts, counts.c.category_id == QuestionCategory.id)
        .where(QuestionCategory.is_active.is_(True))
        .order_by(QuestionCategory.name)
    )
    return [
        CategoryWithCountOut.model_validate(category).model_copy(
            update={"question_count": total}
        )
        for category, total in rows.all()
    ]


async def get_category(db: AsyncSession, category_id: uuid.UUID) -> QuestionCategory:
    category = await db.get(QuestionCategory, category_id)
    if category is None:
        raise NotFoundError("Question category not found")
    return category


async def create_category(db: AsyncSession, payload: CategoryCreate) -> QuestionCategory:
    await _ensure_unique_name(db, QuestionCategory, payload.name, "Category")
    category = QuestionCategory(**payload.model_dump())
    db.add(category)
    await _commit_unique(db, "Category")
    await db.refresh(category)
    logger.info(f"Created question category {category.name}")
    return category


async def update_category(
    db: AsyncSession, category_id: uuid.UUID, payload: CategoryUpdate
) -> QuestionCategory:
    category = await get_category(db, category_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes and changes["name"].lower() != category.name.lower():
        await _ensure_unique_name(db, QuestionCategory, changes["name"], "Category")
    for field, value in changes.items():
        setattr(category, field, value)
    await _commit_unique(db, "Category")
    await db.refresh(category)
    return category


async def deactivate_category(db: AsyncSession, category_id: uuid.UUID) -> None:
    category = await get_category(db, category_id)
    category.is_active = False
    await db.commit()
    logger.info(f"Deactivated question category {category_id}")


# -- tags ---------------------------------------------------------------------

async def list_tags(db: AsyncSession) -> List[TagOut]:
    counts = (
        select(question_tag_links.c.tag_id, func.count().label("question_count"))
        .group_by(question_tag_links.c.tag_id)
        .subquery()
    )
    rows = await db.execute(
        select(QuestionTag, func.coalesce(counts.c.question_count, 0))
        .outerjoin(counts, counts.c.tag_id == QuestionTag.id)
        .where(QuestionTag.is_active.is_(True))
        .order_by(QuestionTag.name)
    )
    return [
        TagOut.model_validate(tag).model_copy(update={"question_count": total})
        for tag, total in rows.all()
    ]


async def create_tag(db: AsyncSession, payload: TagCreate) -> QuestionTag:
    await _ensure_unique_name(db, QuestionTag, payload.name, "Tag")
    tag = QuestionTag(**payload.model_dump())
    db.add(tag)
    await _commit_unique(db, "Tag")
    await db.refresh(tag)
    logger.info(f"Created question tag {tag.name}")
    return tag


async def deactivate_tag(db: AsyncSession, tag_id: uuid.UUID) -> None:
    tag = await db.get(QuestionTag, tag_id)
    if tag is None:
        raise NotFoundError("Question tag not found")
    tag.is_active = False
    await db.commit()
