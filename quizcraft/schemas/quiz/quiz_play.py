from uuid import UUID

from pydantic import BaseModel
from typing import Dict, List, Optional

from quizcraft.schemas.quiz.quiz_base import PersonalityTypeBase, QuestionBase


class QuizResponse(BaseModel):
    question_id: UUID
    answer_id: UUID


class ScoreRequest(BaseModel):
    responses: List[QuizResponse] = []


class QuizResult(BaseModel):
    result: PersonalityTypeBase
    scores: Dict[UUID, float]
    skipped: List[QuizResponse] = []
    share_text: str


class AnswerChoice(BaseModel):
    answer_id: UUID


class SessionOut(BaseModel):
    session_id: str
    quiz_id: UUID
    question_index: int
    total_questions: int
    progress: float
    question: Optional[QuestionBase] = None
    selected_answer_id: Optional[UUID] = None
    completed: bool = False
    result: Optional[QuizResult] = None
