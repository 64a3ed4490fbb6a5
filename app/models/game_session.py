import uuid
from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime


class GameSession(Base):
    __tablename__ = "game_sessions"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    max_rounds = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=False)
    # rounds.game_session_id points back here, so the constraint is added after both tables exist
    current_round_id = Column(
        PG_UUID(as_uuid=True),
        ForeignKey(
            "rounds.id",
            use_alter=True,
            name="fk_game_sessions_current_round_id",
            ondelete="SET NULL",
        ),
        nullable=True,
    )
    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    rounds = relationship(
        "Round",
        back_populates="game_session",
        foreign_keys="Round.game_session_id",
        order_by="Round.round_number",
    )
    current_round = relationship(
        "Round",
        foreign_keys=[current_round_id],
        post_update=True,
    )
    teams = relationship("Team", back_populates="game_session")
