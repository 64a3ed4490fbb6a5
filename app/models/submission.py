import uuid
from sqlalchemy import Column, Boolean, Integer, Text, DateTime, JSON, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("questions.id"), nullable=False, index=True
    )
    round_id = Column(PG_UUID(as_uuid=True), ForeignKey("rounds.id"), nullable=False, index=True)
    team_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True
    )
    # option ids as submitted, including ones that matched nothing
    selected_options = Column(JSON, nullable=False, default=list)
    reasoning = Column(Text, nullable=False)
    points = Column(Integer, nullable=False, default=0)
    is_group_submission = Column(Boolean, nullable=False, default=False)
    is_individual_phase = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    user = relationship("User", back_populates="submissions")
    question = relationship("Question", back_populates="submissions")
    round = relationship("Round", back_populates="submissions")
    team = relationship("Team", back_populates="submissions")
