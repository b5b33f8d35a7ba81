import uuid
from sqlalchemy import Column, Text, String, Integer, ForeignKey, Uuid
from quizcraft.core.database import Base


class Question(Base):
    __tablename__ = "questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    # dense 0..n-1 per quiz, re-derived from list position on every save
    order_index = Column(Integer, nullable=False)
