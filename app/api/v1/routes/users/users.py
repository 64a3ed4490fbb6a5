# app/api/v1/routes/users/users.py

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.core.response import ResponseModel, success_response
from app.core.security import get_password_hash, require_roles
from app.db.deps import get_db
from app.models.submission import Submission
from app.models.team import Team
from app.models.user import User
from app.schemas.users import UserCreate, UserDetailOut, UserUpdate, UserWithTeamOut
from app.utils.enums import Role

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles(Role.admin))],
)

logger = get_logger("routes.users")


async def _load_user(db: AsyncSession, user_id: uuid.UUID, refresh: bool = False) -> User:
    stmt = select(User).options(selectinload(User.team)).where(User.id == user_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    user = (await db.execute(stmt)).scalars().first()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _check_team(db: AsyncSession, team_id):
    if team_id is not None and await db.get(Team, team_id) is None:
        raise ValidationError("Team not found")


@router.get("", response_model=ResponseModel)
async def list_users(db: AsyncSession = Depends(get_db)):
    # enum order and alphabetical order both put admin before student
    result = await db.execute(
        select(User)
        .options(selectinload(User.team))
        .order_by(User.role.asc(), User.created_at.desc())
    )
    users = [UserWithTeamOut.model_validate(u) for u in result.scalars().all()]
    return success_response(msg="Users fetched", data=users)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ResponseModel)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    existing = await db.execute(select(User.id).where(User.email == payload.email))
    if existing.first() is not None:
        raise ConflictError("User with this email already exists")
    await _check_team(db, payload.team_id)

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
        team_id=payload.team_id,
        is_group_leader=payload.is_group_leader,
    )
    db.add(user)
    await db.commit()
    logger.info(f"Created user {user.id} ({user.email})")

    user = await _load_user(db, user.id)
    return success_response(
        msg="User created",
        data=UserWithTeamOut.model_validate(user),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/{user_id}", response_model=ResponseModel)
async def get_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    user = await _load_user(db, user_id)
    count, total = (
        await db.execute(
            select(func.count(Submission.id), func.coalesce(func.sum(Submission.points), 0))
            .where(Submission.user_id == user_id)
        )
    ).one()
    detail = UserDetailOut.model_validate(user).model_copy(
        update={"submission_count": count, "total_submission_points": int(total)}
    )
    return success_response(msg="User fetched", data=detail)


@router.put("/{user_id}", response_model=ResponseModel)
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user = await _load_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("email") and changes["email"] != user.email:
        taken = await db.execute(select(User.id).where(User.email == changes["email"]))
        if taken.first() is not None:
            raise ConflictError("User with this email already exists")
    if "team_id" in changes:
        await _check_team(db, changes["team_id"])

    password = changes.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)
    for field, value in changes.items():
        # team_id may be cleared explicitly; other fields ignore nulls
        if value is None and field != "team_id":
            continue
        setattr(user, field, value)

    await db.commit()
    user = await _load_user(db, user_id, refresh=True)
    return success_response(msg="User updated", data=UserWithTeamOut.model_validate(user))


@router.delete("/{user_id}", response_model=ResponseModel)
async def deactivate_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    user = await _load_user(db, user_id)
    user.is_active = False
    await db.commit()
    logger.info(f"Deactivated user {user_id}")
    return success_response(msg="User deactivated successfully")
