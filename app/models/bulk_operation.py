from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, JSON, String, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship

from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import BulkOperationStatus, BulkOperationType


class BulkOperation(Base):
    __tablename__ = "bulk_operations"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(Enum(BulkOperationType), nullable=False)
    status = Column(
        Enum(BulkOperationStatus), nullable=False, default=BulkOperationStatus.pending
    )
    total_items = Column(Integer, nullable=False, default=0)
    processed_items = Column(Integer, nullable=False, default=0)
    failed_items = Column(Integer, nullable=False, default=0)
    filename = Column(String(255), nullable=True)
    initiated_by = Column(
        PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    result_data = Column(JSON, nullable=True)
    started_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        server_default=func.now(),
        nullable=False,
    )
    completed_at = Column(DateTime(timezone=True), nullable=True)

    initiator = relationship("User", back_populates="bulk_operations", foreign_keys=[initiated_by])

    def mark_finished(self, status: BulkOperationStatus) -> None:
        self.status = status
        if status in (BulkOperationStatus.completed, BulkOperationStatus.failed):
            self.completed_at = get_current_utc_datetime()
