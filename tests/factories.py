"""Builders for test data shared across test modules."""
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_password_hash
from app.models.game_session import GameSession
from app.models.question import Question, QuestionOption
from app.models.round import Round
from app.models.team import Team
from app.models.user import User
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import QuestionType, Role, RoundType


async def create_user(
    session: AsyncSession,
    email: str,
    *,
    password: str = "password123",
    role: Role = Role.student,
    name: Optional[str] = None,
    team: Optional[Team] = None,
    is_group_leader: bool = False,
    is_active: bool = True,
) -> User:
    user = User(
        name=name or email.split("@")[0].title(),
        email=email,
        password_hash=get_password_hash(password),
        role=role,
        team_id=team.id if team else None,
        is_group_leader=is_group_leader,
        is_active=is_active,
    )
    session.add(user)
    await session.commit()
    return user


async def create_game(
    session: AsyncSession,
    *,
    round_type: RoundType = RoundType.individual,
    active: bool = True,
    min_reasoning_words: int = 5,
) -> Dict[str, Any]:
    """Session with round 1 holding one multiple-choice question (A: 10 pts, B: 25 pts)."""
    game_session = GameSession(name="Quarterly Strategy", max_rounds=1)
    session.add(game_session)
    await session.flush()

    round_ = Round(
        game_session_id=game_session.id,
        round_number=1,
        type=round_type,
        title="Market Entry",
    )
    if active:
        round_.activate(get_current_utc_datetime())
    session.add(round_)
    await session.flush()

    option_a = QuestionOption(text="Expand abroad", points=10, is_correct=False, order=0)
    option_b = QuestionOption(text="Consolidate locally", points=25, is_correct=True, order=1)
    question = Question(
        round_id=round_.id,
        title="Where should the company grow?",
        description="Pick the best strategy for next year.",
        question_type=QuestionType.multiple_choice,
        min_reasoning_words=min_reasoning_words,
        options=[option_a, option_b],
    )
    session.add(question)
    if active:
        game_session.is_active = True
        game_session.current_round_id = round_.id
    await session.commit()

    return {
        "session": game_session,
        "round": round_,
        "question": question,
        "option_a": option_a,
        "option_b": option_b,
    }


async def create_team(session: AsyncSession, name: str, *, total_score: int = 0, is_active: bool = True) -> Team:
    team = Team(name=name, total_score=total_score, is_active=is_active)
    session.add(team)
    await session.commit()
    return team
