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
    Table,
    func,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from app.db.deps import Base
from app.utils.datetime_utils import get_current_utc_datetime
from app.utils.enums import QuestionType


question_tag_links = Table(
    "question_tag_links",
    Base.metadata,
    Column(
        "question_id",
        PG_UUID(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        PG_UUID(as_uuid=True),
        ForeignKey("question_tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class QuestionCategory(Base):
    __tablename__ = "question_categories"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(16), nullable=False, default="#3B82F6")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    questions = relationship("Question", back_populates="category")


class QuestionTag(Base):
    __tablename__ = "question_tags"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(16), nullable=False, default="#10B981")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )

    questions = relationship("Question", secondary=question_tag_links, back_populates="tags")


class Question(Base):
    __tablename__ = "questions"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    round_id = Column(PG_UUID(as_uuid=True), ForeignKey("rounds.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    case_file_url = Column(String, nullable=True)
    case_file_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("case_files.id", ondelete="SET NULL"), nullable=True
    )
    category_id = Column(
        PG_UUID(as_uuid=True), ForeignKey("question_categories.id"), nullable=True
    )
    question_type = Column(
        Enum(QuestionType), nullable=False, default=QuestionType.multiple_choice
    )
    min_reasoning_words = Column(Integer, nullable=False, default=15)
    order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    round = relationship("Round", back_populates="questions")
    category = relationship("QuestionCategory", back_populates="questions")
    case_file = relationship("CaseFile", back_populates="questions")
    options = relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.order",
        cascade="all, delete-orphan",
    )
    tags = relationship("QuestionTag", secondary=question_tag_links, back_populates="questions")
    submissions = relationship("Submission", back_populates="question")


class QuestionOption(Base):
    __tablename__ = "question_options"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    question_id = Column(
        PG_UUID(as_uuid=True),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text = Column(Text, nullable=False)
    points = Column(Integer, nullable=False, default=0)  # negative values are penalties
    is_correct = Column(Boolean, nullable=False, default=False)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True), default=get_current_utc_datetime, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=get_current_utc_datetime,
        onupdate=get_current_utc_datetime,
    )

    question = relationship("Question", back_populates="options")
