import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from quizcraft.core.config import settings
from quizcraft.core.database import get_db
from quizcraft.models.quiz_db.quiz_crud import load_quiz_tree_by_slug, record_take
from quizcraft.schemas.quiz.quiz_base import QuizTree
from quizcraft.schemas.quiz.quiz_play import AnswerChoice, QuizResult, ScoreRequest, SessionOut
from quizcraft.services.scoring import score_quiz
from quizcraft.services.sessions import QuizSession, SessionStore

logger = logging.getLogger(__name__)

play_router = APIRouter(prefix="/play", tags=["Play"])

session_store = SessionStore(ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES))


def get_session_store() -> SessionStore:
    return session_store


def get_published_quiz(slug: str, db: Session = Depends(get_db)) -> QuizTree:
    tree = load_quiz_tree_by_slug(db, slug)
    if not tree or not tree.is_published:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return tree


def get_active_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> QuizSession:
    session = store.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Quiz session not found or expired")
    return session


def session_out(
    session: QuizSession,
    result: Optional[QuizResult] = None,
    selected_answer_id: Optional[UUID] = None,
) -> SessionOut:
    return SessionOut(
        session_id=session.session_id,
        quiz_id=session.quiz.id,
        question_index=session.question_index,
        total_questions=session.total_questions,
        progress=session.progress,
        question=session.current_question,
        selected_answer_id=selected_answer_id,
        completed=session.is_complete,
        result=result,
    )


@play_router.get("/{slug}", response_model=QuizTree)
def get_quiz_for_play(quiz: QuizTree = Depends(get_published_quiz)):
    return quiz


@play_router.post("/{slug}/score", response_model=QuizResult)
def score_responses(
    request: ScoreRequest,
    quiz: QuizTree = Depends(get_published_quiz),
    db: Session = Depends(get_db),
):
    result = score_quiz(quiz, request.responses, require_responses=settings.REQUIRE_RESPONSES)
    record_take(db, quiz.id)
    return result


@play_router.post("/{slug}/sessions", response_model=SessionOut, status_code=201)
def start_session(
    quiz: QuizTree = Depends(get_published_quiz),
    store: SessionStore = Depends(get_session_store),
):
    return session_out(store.create(quiz))


@play_router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session: QuizSession = Depends(get_active_session)):
    session.touch()
    return session_out(session)


@play_router.post("/sessions/{session_id}/answer", response_model=SessionOut)
def answer_question(
    choice: AnswerChoice,
    session: QuizSession = Depends(get_active_session),
    store: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
):
    if not session.answer(choice.answer_id):
        return session_out(session)

    # the request that removes the session is the one that scores it
    if not store.discard(session.session_id):
        raise HTTPException(status_code=404, detail="Quiz session not found or expired")
    result = session.finish(require_responses=settings.REQUIRE_RESPONSES)
    record_take(db, session.quiz.id)
    logger.info("Quiz session %s finished with %s", session.session_id, result.result.name)
    return session_out(session, result=result)


@play_router.post("/sessions/{session_id}/back", response_model=SessionOut)
def previous_question(session: QuizSession = Depends(get_active_session)):
    selected = session.back()
    return session_out(session, selected_answer_id=selected)


@play_router.delete("/sessions/{session_id}", status_code=204)
def abandon_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    if not store.discard(session_id):
        raise HTTPException(status_code=404, detail="Quiz session not found or expired")
    return None
