import uuid
from sqlalchemy import Column, String, Text, Integer, ForeignKey, Uuid
from quizcraft.core.database import Base


class PersonalityType(Base):
    __tablename__ = "personality_types"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    color = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    result_image_url = Column(String, nullable=True)
    # declaration order, used to break scoring ties
    position = Column(Integer, nullable=False, default=0)
