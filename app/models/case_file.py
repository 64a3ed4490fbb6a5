import uuid
from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime


class CaseFile(Base):
    __tablename__ = "case_files"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    filename = Column(String, nullable=False)
    original_name = Column(String, nullable=False)
    filepath = Column(String, nullable=False)
    filesize = Column(Integer, nullable=False, default=0)
    mime_type = Column(String, nullable=False, default="application/octet-stream")
    url = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    uploaded_by = Column(
        PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    uploader = relationship("User", back_populates="case_files")
    questions = relationship("Question", back_populates="case_file")
