from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from quizcraft.services.palette import default_color, default_icon


class PersonalityTypeBase(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    color: Optional[str] = None
    icon: Optional[str] = None
    result_image_url: Optional[str] = None


class AnswerBase(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    text: str
    personality_type_id: UUID
    weight: float = 1
    order_index: int = 0


class QuestionBase(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    text: str
    image_url: Optional[str] = None
    order_index: int = 0
    answers: List[AnswerBase] = []


class QuizBase(BaseModel):
    title: str
    description: str
    slug: Optional[str] = None
    cover_image_url: Optional[str] = None
    personality_types: List[PersonalityTypeBase] = []
    questions: List[QuestionBase] = []

    @model_validator(mode="after")
    def fill_type_defaults(self):
        for position, personality_type in enumerate(self.personality_types):
            if not personality_type.color:
                personality_type.color = default_color(position)
            if not personality_type.icon:
                personality_type.icon = default_icon(position)
        return self


class QuizCreate(QuizBase):
    pass


class QuizUpdate(QuizBase):
    pass


class QuizTree(QuizBase):
    """A quiz with its personality types and ordered questions/answers nested."""

    id: UUID = Field(default_factory=uuid4)
    owner_id: Optional[UUID] = None
    is_published: bool = False
    total_takes: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def find_question(self, question_id: UUID) -> Optional[QuestionBase]:
        return next((q for q in self.questions if q.id == question_id), None)

    def find_personality_type(self, type_id: UUID) -> Optional[PersonalityTypeBase]:
        return next((t for t in self.personality_types if t.id == type_id), None)


class QuizSummary(BaseModel):
    id: UUID
    title: str
    description: str
    slug: str
    cover_image_url: Optional[str] = None
    is_published: bool
    total_takes: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OwnerStats(BaseModel):
    total_quizzes: int
    published_quizzes: int
    total_takes: int
