import uuid
from sqlalchemy import Column, Text, Float, Integer, ForeignKey, Uuid
from quizcraft.core.database import Base


class QuizAnswer(Base):
    __tablename__ = "answers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    question_id = Column(Uuid(as_uuid=True), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    personality_type_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("personality_types.id", ondelete="CASCADE"),
        nullable=False
    )
    text = Column(Text, nullable=False)
    weight = Column(Float, nullable=False, default=1)
    order_index = Column(Integer, nullable=False)
