"""Game session lifecycle: creation, partial updates and the start transition."""
from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NoRoundsFoundError, NotFoundError, ValidationError
from app.core.logging_config import get_logger
from app.models.game_session import GameSession
from app.schemas.game import GameSessionCreate, GameSessionUpdate
from app.utils.datetime_utils import get_current_utc_datetime

logger = get_logger("services.game_sessions")


class GameSessionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_sessions(self) -> List[GameSession]:
        stmt = (
            select(GameSession)
            .options(
                selectinload(GameSession.rounds),
                selectinload(GameSession.teams),
                selectinload(GameSession.current_round),
            )
            .order_by(GameSession.created_at.desc())
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def get_session(
        self,
        session_id: uuid.UUID,
        *,
        for_update: bool = False,
        refresh: bool = False,
    ) -> GameSession:
        stmt = (
            select(GameSession)
            .options(
                selectinload(GameSession.rounds),
                selectinload(GameSession.teams),
                selectinload(GameSession.current_round),
            )
            .where(GameSession.id == session_id)
        )
        if for_update:
            stmt = stmt.with_for_update()
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        game_session = (await self.db.execute(stmt)).scalars().first()
        if game_session is None:
            raise NotFoundError("Game session not found")
        return game_session

    async def create_session(self, payload: GameSessionCreate) -> GameSession:
        name = (payload.name or "").strip()
        if not name:
            raise ValidationError("Game session name is required")

        game_session = GameSession(
            name=name,
            description=payload.description,
            max_rounds=payload.max_rounds or 1,
        )
        self.db.add(game_session)
        await self.db.commit()
        logger.info(f"Created game session {game_session.id} ({name})")
        return await self.get_session(game_session.id)

    async def update_session(
        self, session_id: uuid.UUID, payload: GameSessionUpdate
    ) -> GameSession:
        game_session = await self.get_session(session_id)
        changes = payload.model_dump(exclude_unset=True)
        now = get_current_utc_datetime()

        for field in ("name", "description", "max_rounds"):
            if field in changes:
                setattr(game_session, field, changes[field])

        if "is_active" in changes and changes["is_active"] is not None:
            game_session.is_active = changes["is_active"]
            if changes["is_active"]:
                game_session.started_at = now
            else:
                game_session.ended_at = now

        if "current_round_id" in changes:
            round_id = changes["current_round_id"]
            if round_id is not None and round_id not in {r.id for r in game_session.rounds}:
                raise ValidationError("Round does not belong to this game session")
            game_session.current_round_id = round_id

        await self.db.commit()
        return await self.get_session(session_id, refresh=True)

    async def start_session(self, session_id: uuid.UUID) -> GameSession:
        """Activate the session and its first round in a single transaction."""
        try:
            game_session = await self.get_session(session_id, for_update=True, refresh=True)
            first_round = next(
                (r for r in game_session.rounds if r.round_number == 1), None
            )
            if first_round is None:
                raise NoRoundsFoundError()

            now = get_current_utc_datetime()
            for other in game_session.rounds:
                if other.is_active and other.id != first_round.id:
                    other.end(now)
            first_round.activate(now)

            game_session.is_active = True
            game_session.started_at = now
            game_session.ended_at = None
            game_session.current_round_id = first_round.id

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Started game session {session_id}; round {first_round.id} is active")
        return await self.get_session(session_id, refresh=True)
