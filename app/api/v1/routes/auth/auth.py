# app/api/v1/routes/auth/auth.py

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import UnauthorizedError, ValidationError
from app.core.logging_config import get_logger
from app.core.response import ResponseModel, success_response
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)
from app.db.deps import get_db
from app.models.user import User
from app.schemas.auth.auth_schema import LoginRequest, Token, UpdatePasswordRequest
from app.schemas.users import UserOut, UserWithTeamOut

router = APIRouter(prefix="/auth", tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

logger = get_logger("auth")


async def get_user_by_email(db: AsyncSession, email: str):
    q = await db.execute(select(User).where(User.email == email))
    return q.scalars().first()


# Get Current user
async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the caller from a Bearer header, falling back to the session cookie."""
    token = token or request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedError()

    try:
        user_id = uuid.UUID(str(verify_token(token)))
    except (JWTError, ValueError):
        raise UnauthorizedError("Could not validate credentials")

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("Could not validate credentials")
    return user


# User Login
@router.post("/login", response_model=ResponseModel)
async def login(
    creds: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await get_user_by_email(db, creds.email)

    # unknown email and wrong password look the same to the caller
    if not user or not verify_password(creds.password, user.password_hash):
        logger.info(f"Failed login for {creds.email}")
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")

    access_token = create_access_token(subject=str(user.id))
    token = Token(
        access_token=access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserOut.model_validate(user),
    )

    response = success_response(msg="Login successful!", data=token)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info(f"User {user.id} logged in")
    return response


# Logout
@router.post("/logout", response_model=ResponseModel)
async def logout():
    """Clears the session cookie; bearer tokens simply expire."""
    response = success_response(msg="Logged out successfully")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/me", response_model=ResponseModel)
async def read_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(User).options(selectinload(User.team)).where(User.id == current_user.id)
    )
    user = result.scalars().first()
    return success_response(msg="Profile fetched", data=UserWithTeamOut.model_validate(user))


# Update password
@router.put("/update-password", response_model=ResponseModel)
async def update_password(
    req: UpdatePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(req.current_password, current_user.password_hash):
        raise ValidationError("Current password is incorrect")

    current_user.password_hash = get_password_hash(req.new_password)
    db.add(current_user)
    await db.commit()

    return success_response(msg="Password updated successfully")
