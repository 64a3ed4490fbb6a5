# app/core/security.py
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from jose import jwt

from app.core.config import settings
from app.core.exceptions import AdminRequiredError
from app.utils.enums import Role

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    to_encode = {
        "exp": expire,
        "sub": str(subject),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> str:
    """
    Decode a JWT and return the subject (user_id).
    Raises JWTError on any failure.
    """
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    return payload.get("sub")


def require_roles(*allowed: Role):
    """
    Dependency factory: ensures current_user.role in allowed.
    """
    from fastapi import Depends
    from app.api.v1.routes.auth.auth import get_current_user

    def _check(current_user=Depends(get_current_user)):
        if current_user.role not in allowed:
            raise AdminRequiredError()
        return current_user

    return _check
