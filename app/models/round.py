import uuid
from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    Integer,
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import RoundStatus, RoundType


class Round(Base):
    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint("game_session_id", "round_number", name="uq_rounds_session_number"),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    game_session_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("game_sessions.id"), nullable=False, index=True
    )
    round_number = Column(Integer, nullable=False)
    type = Column(Enum(RoundType), nullable=False, default=RoundType.individual)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    time_limit = Column(Integer, nullable=True)  # minutes, display only
    is_active = Column(Boolean, nullable=False, default=False)
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

    game_session = relationship(
        "GameSession", back_populates="rounds", foreign_keys=[game_session_id]
    )
    questions = relationship("Question", back_populates="round", order_by="Question.order")
    submissions = relationship("Submission", back_populates="round")

    @property
    def status(self) -> RoundStatus:
        if self.is_active:
            return RoundStatus.active
        if self.started_at is None:
            return RoundStatus.pending
        return RoundStatus.ended

    def activate(self, now) -> None:
        self.is_active = True
        self.started_at = now
        self.ended_at = None

    def end(self, now) -> None:
        self.is_active = False
        self.ended_at = now
