import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID

from quizcraft.schemas.quiz.quiz_base import QuestionBase, QuizTree
from quizcraft.schemas.quiz.quiz_play import QuizResponse, QuizResult
from quizcraft.services.errors import QuizValidationError
from quizcraft.services.scoring import score_quiz

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class QuizSession:
    """One pass through a quiz: questions are presented in order, one answer each."""

    def __init__(self, quiz: QuizTree, session_id: Optional[str] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.quiz = quiz
        self.responses: List[QuizResponse] = []
        self.question_index = 0
        self.last_seen = _now()
        self._lock = threading.Lock()

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    @property
    def is_complete(self) -> bool:
        return self.question_index >= self.total_questions

    @property
    def progress(self) -> float:
        if not self.total_questions:
            return 100.0
        return round(self.question_index / self.total_questions * 100, 2)

    @property
    def current_question(self) -> Optional[QuestionBase]:
        if self.is_complete:
            return None
        return self.quiz.questions[self.question_index]

    def touch(self) -> None:
        self.last_seen = _now()

    def answer(self, answer_id: UUID) -> bool:
        """Record an answer to the current question.

        Returns True only for the call that answered the last question, so
        concurrent requests on one session finish it at most once.
        """
        with self._lock:
            question = self.current_question
            if question is None:
                raise QuizValidationError("Quiz session is already complete")
            if not any(a.id == answer_id for a in question.answers):
                raise QuizValidationError(f"Answer {answer_id} is not a choice for the current question")

            self.responses.append(QuizResponse(question_id=question.id, answer_id=answer_id))
            self.question_index += 1
            self.touch()
            return self.is_complete

    def back(self) -> UUID:
        """Step back one question and return the answer that had been chosen there."""
        with self._lock:
            if self.is_complete:
                raise QuizValidationError("Quiz session is already complete")
            if self.question_index == 0:
                raise QuizValidationError("Already at the first question")
            previous = self.responses.pop()
            self.question_index -= 1
            self.touch()
            return previous.answer_id

    def finish(self, require_responses: bool = False) -> QuizResult:
        with self._lock:
            if not self.is_complete:
                raise QuizValidationError(
                    f"Quiz session still has {self.total_questions - self.question_index} unanswered questions"
                )
            responses = list(self.responses)
        return score_quiz(self.quiz, responses, require_responses=require_responses)


class SessionStore:
    def __init__(self, ttl: timedelta):
        self.ttl = ttl
        self.sessions: Dict[str, QuizSession] = {}
        self._lock = threading.Lock()

    def create(self, quiz: QuizTree) -> QuizSession:
        session = QuizSession(quiz)
        with self._lock:
            self._purge_expired()
            self.sessions[session.session_id] = session
        logger.info("Started quiz session %s for quiz %s", session.session_id, quiz.id)
        return session

    def get(self, session_id: str) -> Optional[QuizSession]:
        with self._lock:
            self._purge_expired()
            return self.sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        with self._lock:
            removed = self.sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Closed quiz session %s", session_id)
        return removed is not None

    def __len__(self) -> int:
        return len(self.sessions)

    def _purge_expired(self) -> None:
        cutoff = _now() - self.ttl
        expired = [sid for sid, s in self.sessions.items() if s.last_seen < cutoff]
        for sid in expired:
            del self.sessions[sid]
        if expired:
            logger.info("Expired %d idle quiz sessions", len(expired))
