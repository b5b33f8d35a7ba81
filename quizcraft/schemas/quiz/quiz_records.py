from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class RecordModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class QuizRecord(RecordModel):
    id: UUID
    owner_id: Optional[UUID] = None
    title: str
    description: str
    slug: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_published: bool = False
    total_takes: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PersonalityTypeRecord(RecordModel):
    id: UUID
    quiz_id: UUID
    name: str
    description: str
    color: str
    icon: str
    result_image_url: Optional[str] = None
    position: int


class QuestionRecord(RecordModel):
    id: UUID
    quiz_id: UUID
    text: str
    image_url: Optional[str] = None
    order_index: int


class AnswerRecord(RecordModel):
    id: UUID
    question_id: UUID
    personality_type_id: UUID
    text: str
    weight: float
    order_index: int


class SaveRecords(BaseModel):
    quiz: QuizRecord
    personality_types: List[PersonalityTypeRecord]
    questions: List[QuestionRecord]
    answers: List[AnswerRecord]
