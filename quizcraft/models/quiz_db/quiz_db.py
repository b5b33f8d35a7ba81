import uuid
from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, Uuid
from quizcraft.core.database import Base
from quizcraft.models.user_db.user_db import utcnow


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        unique=True,
        index=True
    )

    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    cover_image_url = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    total_takes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
