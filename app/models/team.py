import uuid
from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime


class Team(Base):
    __tablename__ = "teams"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, unique=True, nullable=False)
    game_session_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("game_sessions.id", ondelete="SET NULL"), nullable=True
    )
    total_score = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    members = relationship("User", back_populates="team")
    game_session = relationship("GameSession", back_populates="teams")
    submissions = relationship("Submission", back_populates="team")
