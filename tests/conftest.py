from __future__ import annotations

import os
from typing import AsyncGenerator, Dict, Optional

# settings are read on import, so test defaults must be in place first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_bootstrap.sqlite")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.api.v1.routes.auth.auth import get_current_user
from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.db.deps import Base, get_db
from app.main import app as main_app
from app.models.user import User
from app.services.storage_service import reset_storage_backend
from app.utils.enums import Role
from tests.factories import create_user


@pytest.fixture()
def test_app() -> FastAPI:
    return main_app


@pytest.fixture()
def test_db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'test_simulation.sqlite'}"


@pytest_asyncio.fixture()
async def engine(test_db_url: str):
    engine = create_async_engine(test_db_url, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    reset_storage_backend()
    yield target
    reset_storage_backend()


@pytest_asyncio.fixture()
async def admin_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "admin@example.com", role=Role.admin, name="Admin User")


@pytest_asyncio.fixture()
async def student_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "student@example.com", name="Sam Student")


@pytest.fixture()
def auth_state() -> Dict[str, Optional[User]]:
    return {"user": None}


@pytest.fixture()
def login_as(auth_state):
    def _login_as(user: Optional[User]) -> None:
        auth_state["user"] = user

    return _login_as


@pytest_asyncio.fixture()
async def client(
    test_app: FastAPI, db_session: AsyncSession, admin_user: User, auth_state
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose caller is ``auth_state['user']`` (the admin unless switched)."""
    auth_state["user"] = admin_user

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    async def _get_test_user():
        if auth_state["user"] is None:
            raise UnauthorizedError()
        return auth_state["user"]

    test_app.dependency_overrides[get_db] = _get_test_db
    test_app.dependency_overrides[get_current_user] = _get_test_user

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client

    test_app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def anon_client(
    test_app: FastAPI, db_session: AsyncSession
) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through the real token/cookie authentication."""

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    test_app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client

    test_app.dependency_overrides.clear()
