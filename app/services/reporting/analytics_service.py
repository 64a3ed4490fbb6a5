"""Admin dashboard aggregates.

Daily buckets are built in Python from ``submitted_at`` values so the same
code runs on PostgreSQL and SQLite.
"""
from __future__ import annotations

from collections import Counter, OrderedDict
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.game_session import GameSession
from app.models.question import Question, QuestionCategory
from app.models.submission import Submission
from app.models.team import Team
from app.models.user import User
from app.utils.datetime_utils import as_utc, build_day_range, get_current_utc_datetime

UNCATEGORIZED = "Uncategorized"
UNCATEGORIZED_COLOR = "#6B7280"
RECENT_DAYS = 7
ACTIVITY_DAYS = 30
TOP_TEAMS = 5


async def _count(db: AsyncSession, column, *criteria) -> int:
    stmt = select(func.count(column))
    if criteria:
        stmt = stmt.where(*criteria)
    return (await db.scalar(stmt)) or 0


async def overview_counts(db: AsyncSession) -> Dict[str, int]:
    return {
        "total_users": await _count(db, User.id),
        "active_users": await _count(db, User.id, User.is_active.is_(True)),
        "total_teams": await _count(db, Team.id),
        "active_teams": await _count(db, Team.id, Team.is_active.is_(True)),
        "total_game_sessions": await _count(db, GameSession.id),
        "active_game_sessions": await _count(db, GameSession.id, GameSession.is_active.is_(True)),
        "total_questions": await _count(db, Question.id, Question.is_active.is_(True)),
        "total_submissions": await _count(db, Submission.id),
    }


async def recent_activity(db: AsyncSession, now) -> Dict[str, int]:
    since = now - timedelta(days=RECENT_DAYS)
    return {
        "new_users": await _count(db, User.id, User.created_at >= since),
        "new_teams": await _count(db, Team.id, Team.created_at >= since),
        "new_submissions": await _count(db, Submission.id, Submission.submitted_at >= since),
    }


async def top_teams(db: AsyncSession, limit: int = TOP_TEAMS) -> List[Dict[str, Any]]:
    result = await db.execute(
        select(Team)
        .options(selectinload(Team.members))
        .where(Team.is_active.is_(True))
        .order_by(Team.total_score.desc())
        .limit(limit)
    )
    return [
        {
            "id": team.id,
            "name": team.name,
            "total_score": team.total_score,
            "members": [{"id": m.id, "name": m.name} for m in team.members],
        }
        for team in result.scalars().all()
    ]


async def questions_by_category(db: AsyncSession) -> List[Dict[str, Any]]:
    """Histogram of active questions; missing or inactive categories share one bucket."""
    rows = await db.execute(
        select(
            QuestionCategory.name,
            QuestionCategory.color,
            QuestionCategory.is_active,
            func.count(Question.id),
        )
        .select_from(Question)
        .outerjoin(QuestionCategory, Question.category_id == QuestionCategory.id)
        .where(Question.is_active.is_(True))
        .group_by(QuestionCategory.id, QuestionCategory.name, QuestionCategory.color, QuestionCategory.is_active)
    )

    buckets: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    uncategorized = 0
    for name, color, is_active, total in rows.all():
        if name is None or not is_active:
            uncategorized += total
            continue
        buckets[name] = {"category": name, "color": color, "count": total}

    histogram = sorted(buckets.values(), key=lambda b: (-b["count"], b["category"]))
    if uncategorized:
        histogram.append(
            {"category": UNCATEGORIZED, "color": UNCATEGORIZED_COLOR, "count": uncategorized}
        )
    return histogram


async def submission_activity(db: AsyncSession, now) -> List[Dict[str, Any]]:
    start = now - timedelta(days=ACTIVITY_DAYS - 1)
    start = start.replace(hour=0, minute=0, second=0, microsecond=0)
    result = await db.execute(
        select(Submission.submitted_at).where(Submission.submitted_at >= start)
    )
    per_day = Counter(as_utc(ts).date() for ts in result.scalars().all() if ts is not None)
    return [
        {"date": day.isoformat(), "submissions": per_day.get(day, 0)}
        for day in build_day_range(start, now)
    ]


async def build_dashboard(db: AsyncSession) -> Dict[str, Any]:
    now = get_current_utc_datetime()
    return {
        "overview": await overview_counts(db),
        "recent_activity": await recent_activity(db, now),
        "top_teams": await top_teams(db),
        "questions_by_category": await questions_by_category(db),
        "submission_activity": await submission_activity(db, now),
    }
