"""Round listing and the activate/end transitions.

Activation is the one place where "at most one active round per game session"
is enforced, so it runs with the owning session row locked and commits once.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, RoundNotActiveError
from app.core.logging_config import get_logger
from app.models.game_session import GameSession
from app.models.question import Question
from app.models.round import Round
from app.models.submission import Submission
from app.schemas.game import RoundCreate, RoundSummaryOut
from app.utils.datetime_utils import get_current_utc_datetime

logger = get_logger("services.rounds")


async def count_by_round(
    db: AsyncSession, round_ids: List[uuid.UUID]
) -> Dict[uuid.UUID, Dict[str, int]]:
    """Question and submission totals keyed by round id."""
    counts: Dict[uuid.UUID, Dict[str, int]] = {
        rid: {"question_count": 0, "submission_count": 0} for rid in round_ids
    }
    if not round_ids:
        return counts

    question_rows = await db.execute(
        select(Question.round_id, func.count(Question.id))
        .where(Question.round_id.in_(round_ids))
        .group_by(Question.round_id)
    )
    for round_id, total in question_rows.all():
        counts[round_id]["question_count"] = total

    submission_rows = await db.execute(
        select(Submission.round_id, func.count(Submission.id))
        .where(Submission.round_id.in_(round_ids))
        .group_by(Submission.round_id)
    )
    for round_id, total in submission_rows.all():
        counts[round_id]["submission_count"] = total
    return counts


def summarize_rounds(
    rounds: List[Round], counts: Dict[uuid.UUID, Dict[str, int]]
) -> List[RoundSummaryOut]:
    return [
        RoundSummaryOut.model_validate(r).model_copy(update=counts.get(r.id, {}))
        for r in rounds
    ]


class RoundService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_rounds(
        self, game_session_id: Optional[uuid.UUID] = None
    ) -> List[RoundSummaryOut]:
        stmt = select(Round).order_by(Round.game_session_id.desc(), Round.round_number.asc())
        if game_session_id is not None:
            stmt = stmt.where(Round.game_session_id == game_session_id)
        rounds = list((await self.db.execute(stmt)).scalars().all())
        counts = await count_by_round(self.db, [r.id for r in rounds])
        return summarize_rounds(rounds, counts)

    async def get_round(self, round_id: uuid.UUID) -> Round:
        round_ = await self.db.get(Round, round_id)
        if round_ is None:
            raise NotFoundError("Round not found")
        return round_

    async def create_round(self, payload: RoundCreate) -> Round:
        if await self.db.get(GameSession, payload.game_session_id) is None:
            raise NotFoundError("Game session not found")

        duplicate = await self.db.execute(
            select(Round.id).where(
                Round.game_session_id == payload.game_session_id,
                Round.round_number == payload.round_number,
            )
        )
        if duplicate.first() is not None:
            raise ConflictError(
                f"Round {payload.round_number} already exists in this game session"
            )

        round_ = Round(**payload.model_dump())
        self.db.add(round_)
        await self.db.commit()
        await self.db.refresh(round_)
        logger.info(
            f"Created round {round_.round_number} ({round_.id}) for session {round_.game_session_id}"
        )
        return round_

    async def activate_round(self, round_id: uuid.UUID) -> Round:
        """Make ``round_id`` the only active round of its game session."""
        try:
            target = await self.get_round(round_id)
            game_session = (
                await self.db.execute(
                    select(GameSession)
                    .where(GameSession.id == target.game_session_id)
                    .with_for_update()
                )
            ).scalars().first()

            now = get_current_utc_datetime()
            siblings = await self.db.execute(
                select(Round).where(
                    Round.game_session_id == target.game_session_id,
                    Round.is_active.is_(True),
                    Round.id != target.id,
                )
            )
            for other in siblings.scalars().all():
                other.end(now)

            target.activate(now)
            if game_session is not None:
                game_session.current_round_id = target.id

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(target)
        logger.info(f"Activated round {target.id} in session {target.game_session_id}")
        return target

    async def end_round(self, round_id: uuid.UUID) -> Round:
        try:
            round_ = await self.get_round(round_id)
            if not round_.is_active:
                raise RoundNotActiveError()

            round_.end(get_current_utc_datetime())
            game_session = await self.db.get(GameSession, round_.game_session_id)
            if game_session is not None and game_session.current_round_id == round_.id:
                game_session.current_round_id = None

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(round_)
        logger.info(f"Ended round {round_.id}")
        return round_
