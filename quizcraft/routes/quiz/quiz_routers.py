from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session
from uuid import UUID

from quizcraft.core.database import get_db
from quizcraft.core.security import get_current_user
from quizcraft.models.quiz_db.quiz_crud import (
    count_quizzes,
    delete_quiz,
    get_quiz,
    list_quizzes,
    owner_stats,
    save_quiz_tree,
    set_published,
    tree_from_row,
)
from quizcraft.models.quiz_db.quiz_db import Quiz
from quizcraft.models.user_db.user_db import User
from quizcraft.schemas.common.page_response import PageResponse
from quizcraft.schemas.quiz.quiz_base import OwnerStats, QuizCreate, QuizSummary, QuizTree, QuizUpdate
from quizcraft.services.drafts import QuizDraft
from quizcraft.services.importer import export_quiz_document

quiz_router = APIRouter(prefix="/quizzes", tags=["Quiz"])


def get_owned_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Quiz:
    quiz = get_quiz(db, quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    if quiz.owner_id != current_user.id:
        raise HTTPException(status_code=403, detail="You do not own this quiz")
    return quiz


def _page(db: Session, page: int, size: int, **filters) -> PageResponse[QuizSummary]:
    total = count_quizzes(db, **filters)
    quizzes = list_quizzes(db, skip=PageResponse.offset(page, size), limit=size, **filters)
    return PageResponse[QuizSummary].build(
        [QuizSummary.model_validate(q) for q in quizzes], total, page, size
    )


def _read_document(file: UploadFile) -> bytes:
    try:
        return file.file.read()
    finally:
        file.file.close()


@quiz_router.post("/", response_model=QuizTree, status_code=201)
def create_quiz(
    quiz_in: QuizCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tree = QuizTree(**quiz_in.model_dump(), owner_id=current_user.id)
    return save_quiz_tree(db, current_user.id, tree)


@quiz_router.get("/", response_model=PageResponse[QuizSummary])
def list_published_quizzes(
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return _page(db, page, size, published_only=True)


@quiz_router.get("/mine", response_model=PageResponse[QuizSummary])
def list_my_quizzes(
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _page(db, page, size, owner_id=current_user.id)


@quiz_router.get("/stats", response_model=OwnerStats)
def get_my_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return owner_stats(db, current_user.id)


@quiz_router.post("/import", response_model=QuizTree, status_code=201)
def import_new_quiz(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    draft = QuizDraft(owner_id=current_user.id)
    draft.apply_import(_read_document(file))
    return save_quiz_tree(db, current_user.id, draft.to_tree())


@quiz_router.get("/{quiz_id}", response_model=QuizTree)
def get_quiz_tree(quiz: Quiz = Depends(get_owned_quiz), db: Session = Depends(get_db)):
    return tree_from_row(db, quiz)


@quiz_router.put("/{quiz_id}", response_model=QuizTree)
def update_quiz(
    quiz_in: QuizUpdate,
    quiz: Quiz = Depends(get_owned_quiz),
    db: Session = Depends(get_db),
):
    tree = QuizTree(
        **quiz_in.model_dump(),
        id=quiz.id,
        owner_id=quiz.owner_id,
        is_published=quiz.is_published,
    )
    return save_quiz_tree(db, quiz.owner_id, tree)


@quiz_router.put("/{quiz_id}/import", response_model=QuizTree)
def import_into_quiz(
    file: UploadFile = File(...),
    quiz: Quiz = Depends(get_owned_quiz),
    db: Session = Depends(get_db),
):
    draft = QuizDraft.from_tree(tree_from_row(db, quiz))
    draft.apply_import(_read_document(file))
    return save_quiz_tree(db, quiz.owner_id, draft.to_tree())


@quiz_router.get("/{quiz_id}/export")
def export_quiz(quiz: Quiz = Depends(get_owned_quiz), db: Session = Depends(get_db)):
    return export_quiz_document(tree_from_row(db, quiz))


@quiz_router.post("/{quiz_id}/publish", response_model=QuizTree)
def publish_quiz(quiz: Quiz = Depends(get_owned_quiz), db: Session = Depends(get_db)):
    return set_published(db, quiz, True)


@quiz_router.post("/{quiz_id}/unpublish", response_model=QuizTree)
def unpublish_quiz(quiz: Quiz = Depends(get_owned_quiz), db: Session = Depends(get_db)):
    return set_published(db, quiz, False)


@quiz_router.delete("/{quiz_id}", status_code=204)
def remove_quiz(quiz: Quiz = Depends(get_owned_quiz), db: Session = Depends(get_db)):
    delete_quiz(db, quiz)
    return None
