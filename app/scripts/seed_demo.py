"""
Demo data seeder

Creates a ready-to-play game: three teams of three students (one leader each),
a three-round session (individual, group, mix) with one question per round,
and round 1 already running. Running it again is a no-op while the demo
session exists.

Usage:
  python -m app.scripts.seed_demo [--password student123]
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging_config import get_logger
from app.core.security import get_password_hash
from app.db.deps import AsyncSessionLocal
from app.models.game_session import GameSession
from app.models.question import Question, QuestionOption
from app.models.round import Round
from app.models.team import Team
from app.models.user import User
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import QuestionType, Role, RoundType

logger = get_logger("scripts.seed_demo")

DEMO_SESSION_NAME = "Q1 Business Strategy Simulation"

TEAMS: Dict[str, List[tuple]] = {
    # name, email, individual score; the first member leads the team
    "Alpha Team": [
        ("Alice Johnson", "alice@example.com", 85),
        ("Bob Smith", "bob@example.com", 78),
        ("Carol Wilson", "carol@example.com", 92),
    ],
    "Beta Team": [
        ("David Brown", "david@example.com", 88),
        ("Eva Davis", "eva@example.com", 81),
        ("Frank Miller", "frank@example.com", 76),
    ],
    "Gamma Team": [
        ("Grace Taylor", "grace@example.com", 90),
        ("Henry Clark", "henry@example.com", 84),
        ("Ivy Rodriguez", "ivy@example.com", 87),
    ],
}

ROUNDS: List[Dict[str, Any]] = [
    {
        "type": RoundType.individual,
        "title": "Market Entry Strategy",
        "description": "Analyze market conditions and choose the best entry strategy for your company.",
        "time_limit": 30,
        "question": {
            "title": "Market Entry Decision",
            "description": "Based on the market analysis in the case study, which entry strategy fits best?",
            "question_type": QuestionType.multiple_choice,
            "min_reasoning_words": 20,
            "case_file_url": "/case-files/market-analysis-q1.pdf",
            "options": [
                ("Direct investment with full subsidiary", 15, False),
                ("Joint venture with local partner", 25, True),
                ("Licensing agreement", 10, False),
                ("Export through distributors", 20, False),
            ],
        },
    },
    {
        "type": RoundType.group,
        "title": "Crisis Management",
        "description": "Work as a team to navigate through a major business crisis.",
        "time_limit": 45,
        "question": {
            "title": "Crisis Response Strategy",
            "description": "A product recall has triggered a PR crisis. How should your team respond?",
            "question_type": QuestionType.multi_select,
            "min_reasoning_words": 30,
            "case_file_url": "/case-files/crisis-scenario.pdf",
            "options": [
                ("Issue immediate public apology", 20, True),
                ("Launch comprehensive investigation", 25, True),
                ("Offer full refunds and compensation", 20, True),
                ("Deny responsibility initially", -10, False),
                ("Implement new quality assurance measures", 15, True),
            ],
        },
    },
    {
        "type": RoundType.mix,
        "title": "Strategic Partnership",
        "description": "Decide individually, then reach a team consensus on a strategic partner.",
        "time_limit": 60,
        "question": {
            "title": "Partnership Selection",
            "description": "Which partner would provide the most value for long-term growth?",
            "question_type": QuestionType.multiple_choice,
            "min_reasoning_words": 25,
            "case_file_url": "/case-files/partnership-options.pdf",
            "options": [
                ("Technology startup with innovative solutions", 30, True),
                ("Established competitor in adjacent market", 20, False),
                ("Supplier with strong distribution network", 25, False),
                ("Government agency for regulatory support", 15, False),
            ],
        },
    },
]


async def seed_demo(db: AsyncSession, *, password: str = "student123") -> bool:
    """Insert the demo game. Returns False when it is already present."""
    existing = await db.execute(select(GameSession.id).where(GameSession.name == DEMO_SESSION_NAME))
    if existing.first() is not None:
        logger.info(f"Demo session '{DEMO_SESSION_NAME}' already exists. Skipping seed.")
        return False

    now = get_current_utc_datetime()
    game_session = GameSession(
        name=DEMO_SESSION_NAME,
        description="Strategic decision-making in competitive markets.",
        max_rounds=len(ROUNDS),
        is_active=True,
        started_at=now,
    )
    db.add(game_session)
    await db.flush()

    password_hash = get_password_hash(password)
    for team_name, members in TEAMS.items():
        team = Team(
            name=team_name,
            game_session_id=game_session.id,
            total_score=sum(score for _, _, score in members),
        )
        db.add(team)
        await db.flush()
        for index, (name, email, score) in enumerate(members):
            db.add(
                User(
                    name=name,
                    email=email,
                    password_hash=password_hash,
                    role=Role.student,
                    team_id=team.id,
                    is_group_leader=index == 0,
                    individual_score=score,
                )
            )

    for number, entry in enumerate(ROUNDS, start=1):
        round_ = Round(
            game_session_id=game_session.id,
            round_number=number,
            type=entry["type"],
            title=entry["title"],
            description=entry["description"],
            time_limit=entry["time_limit"],
        )
        if number == 1:
            round_.activate(now)
        db.add(round_)
        await db.flush()
        if number == 1:
            game_session.current_round_id = round_.id

        q = entry["question"]
        db.add(
            Question(
                round_id=round_.id,
                title=q["title"],
                description=q["description"],
                case_file_url=q["case_file_url"],
                question_type=q["question_type"],
                min_reasoning_words=q["min_reasoning_words"],
                order=1,
                options=[
                    QuestionOption(text=text, points=points, is_correct=correct, order=i)
                    for i, (text, points, correct) in enumerate(q["options"], start=1)
                ],
            )
        )

    await db.commit()
    logger.info(f"Seeded demo session {game_session.id} with {len(TEAMS)} teams")
    return True


async def main(password: str) -> None:
    async with AsyncSessionLocal() as db:
        await seed_demo(db, password=password)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a demo business-simulation game")
    parser.add_argument("--password", default="student123", help="Password for every demo student")
    args = parser.parse_args()
    asyncio.run(main(args.password))
