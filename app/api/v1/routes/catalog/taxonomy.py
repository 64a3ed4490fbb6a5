# app/api/v1/routes/catalog/taxonomy.py

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.response import ResponseModel, success_response
from app.core.security import require_roles
from app.db.deps import get_db
from app.schemas.questions import CategoryCreate, CategoryOut, CategoryUpdate, TagCreate, TagOut
from app.services.catalog import taxonomy_service
from app.utils.enums import Role

admin_only = [Depends(require_roles(Role.admin))]

categories_router = APIRouter(
    prefix="/question-categories", tags=["question-categories"], dependencies=admin_only
)
tags_router = APIRouter(prefix="/question-tags", tags=["question-tags"], dependencies=admin_only)


@categories_router.get("", response_model=ResponseModel)
async def list_categories(db: AsyncSession = Depends(get_db)):
    categories = await taxonomy_service.list_categories(db)
    return success_response(msg="Categories fetched", data=categories)


@categories_router.post("", status_code=status.HTTP_201_CREATED, response_model=ResponseModel)
async def create_category(payload: CategoryCreate, db: AsyncSession = Depends(get_db)):
    category = await taxonomy_service.create_category(db, payload)
    return success_response(
        msg="Category created",
        data=CategoryOut.model_validate(category),
        status_code=status.HTTP_201_CREATED,
    )


@categories_router.put("/{category_id}", response_model=ResponseModel)
async def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    category = await taxonomy_service.update_category(db, category_id, payload)
    return success_response(msg="Category updated", data=CategoryOut.model_validate(category))


@categories_router.delete("/{category_id}", response_model=ResponseModel)
async def delete_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await taxonomy_service.deactivate_category(db, category_id)
    return success_response(msg="Category deactivated successfully")


@tags_router.get("", response_model=ResponseModel)
async def list_tags(db: AsyncSession = Depends(get_db)):
    return success_response(msg="Tags fetched", data=await taxonomy_service.list_tags(db))


@tags_router.post("", status_code=status.HTTP_201_CREATED, response_model=ResponseModel)
async def create_tag(payload: TagCreate, db: AsyncSession = Depends(get_db)):
    tag = await taxonomy_service.create_tag(db, payload)
    return success_response(
        msg="Tag created",
        data=TagOut.model_validate(tag),
        status_code=status.HTTP_201_CREATED,
    )


@tags_router.delete("/{tag_id}", response_model=ResponseModel)
async def delete_tag(tag_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await taxonomy_service.deactivate_tag(db, tag_id)
    return success_response(msg="Tag deactivated successfully")
