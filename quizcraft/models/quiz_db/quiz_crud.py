import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quizcraft.models.quiz_db.personality_type_db import PersonalityType
from quizcraft.models.quiz_db.question_db import Question
from quizcraft.models.quiz_db.quiz_answer_db import QuizAnswer
from quizcraft.models.quiz_db.quiz_db import Quiz
from quizcraft.models.user_db.user_db import utcnow
from quizcraft.schemas.quiz.quiz_base import OwnerStats, QuizTree
from quizcraft.schemas.quiz.quiz_records import (
    AnswerRecord,
    PersonalityTypeRecord,
    QuestionRecord,
    QuizRecord,
)
from quizcraft.services.errors import QuizValidationError, StorageError
from quizcraft.services.slugs import slugify
from quizcraft.services.transform import (
    build_quiz_tree,
    build_save_records,
    check_required_fields,
    validate_for_publish,
)

logger = logging.getLogger(__name__)


def get_quiz(db: Session, quiz_id: UUID) -> Optional[Quiz]:
    return db.query(Quiz).filter(Quiz.id == quiz_id).first()


def get_quiz_by_slug(db: Session, slug: str) -> Optional[Quiz]:
    return db.query(Quiz).filter(Quiz.slug == slug).first()


def _answers_for_quiz(db: Session, quiz_id: UUID) -> List[QuizAnswer]:
    return (
        db.query(QuizAnswer)
        .join(Question, QuizAnswer.question_id == Question.id)
        .filter(Question.quiz_id == quiz_id)
        .all()
    )


def tree_from_row(db: Session, quiz: Quiz) -> QuizTree:
    questions = db.query(Question).filter(Question.quiz_id == quiz.id).all()
    types = db.query(PersonalityType).filter(PersonalityType.quiz_id == quiz.id).all()
    answers = _answers_for_quiz(db, quiz.id)

    return build_quiz_tree(
        QuizRecord.model_validate(quiz),
        [QuestionRecord.model_validate(q) for q in questions],
        [AnswerRecord.model_validate(a) for a in answers],
        [PersonalityTypeRecord.model_validate(t) for t in types],
    )


def load_quiz_tree(db: Session, quiz_id: UUID) -> Optional[QuizTree]:
    quiz = get_quiz(db, quiz_id)
    if not quiz:
        return None
    return tree_from_row(db, quiz)


def load_quiz_tree_by_slug(db: Session, slug: str) -> Optional[QuizTree]:
    quiz = get_quiz_by_slug(db, slug)
    if not quiz:
        return None
    return tree_from_row(db, quiz)


def _slug_taken(db: Session, slug: str, quiz_id: UUID) -> bool:
    return db.query(Quiz.id).filter(Quiz.slug == slug, Quiz.id != quiz_id).first() is not None


def resolve_slug(db: Session, tree: QuizTree, stored_slug: Optional[str] = None) -> str:
    """Pick the slug to save: explicit, else the one already stored, else derived from the title."""
    if tree.slug:
        if _slug_taken(db, tree.slug, tree.id):
            raise QuizValidationError(f'Slug "{tree.slug}" is already in use')
        return tree.slug
    if stored_slug:
        # public play links stay put when a quiz is retitled
        return stored_slug

    base = slugify(tree.title)
    slug = base
    suffix = 2
    while _slug_taken(db, slug, tree.id):
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug


def _upsert(db: Session, model, records, existing_rows) -> list:
    """Insert or update one row per record; return existing rows with no record left."""
    by_id = {row.id: row for row in existing_rows}
    for record in records:
        values = record.model_dump()
        row = by_id.pop(record.id, None)
        if row is None:
            db.add(model(**values))
        else:
            for key, value in values.items():
                setattr(row, key, value)
    return list(by_id.values())


def save_quiz_tree(db: Session, owner_id: UUID, tree: QuizTree) -> QuizTree:
    """Persist a quiz tree in one transaction.

    Rows are matched by their stable ids: existing ones are updated, new ones
    inserted and rows missing from the tree deleted. Either every step lands
    or none does.
    """
    check_required_fields(tree)
    if tree.is_published:
        validate_for_publish(tree)

    try:
        quiz = get_quiz(db, tree.id)
        slug = resolve_slug(db, tree, quiz.slug if quiz is not None else None)
        tree = tree.model_copy(update={"slug": slug, "owner_id": owner_id})
        records = build_save_records(tree)

        if quiz is None:
            quiz = Quiz(id=tree.id, owner_id=owner_id, total_takes=0)
            db.add(quiz)
        quiz.title = records.quiz.title
        quiz.description = records.quiz.description
        quiz.slug = records.quiz.slug
        quiz.cover_image_url = records.quiz.cover_image_url
        quiz.is_published = records.quiz.is_published
        quiz.updated_at = utcnow()
        db.flush()

        existing_types = db.query(PersonalityType).filter(PersonalityType.quiz_id == quiz.id).all()
        existing_questions = db.query(Question).filter(Question.quiz_id == quiz.id).all()
        existing_answers = _answers_for_quiz(db, quiz.id)

        stale_types = _upsert(db, PersonalityType, records.personality_types, existing_types)
        db.flush()
        stale_questions = _upsert(db, Question, records.questions, existing_questions)
        db.flush()
        stale_answers = _upsert(db, QuizAnswer, records.answers, existing_answers)
        db.flush()

        for row in stale_answers + stale_questions + stale_types:
            db.delete(row)
            db.flush()

        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Rejected save of quiz %s: %s", tree.id, exc.orig)
        raise QuizValidationError("Quiz conflicts with existing records (duplicate slug or identifiers)") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to save quiz %s", tree.id, exc_info=True)
        raise StorageError("Could not save the quiz") from exc

    logger.info(
        "Saved quiz %s (%d types, %d questions, %d answers)",
        tree.id, len(records.personality_types), len(records.questions), len(records.answers),
    )
    return load_quiz_tree(db, tree.id)


def set_published(db: Session, quiz: Quiz, published: bool) -> QuizTree:
    if published:
        validate_for_publish(tree_from_row(db, quiz))
    try:
        quiz.is_published = published
        quiz.updated_at = utcnow()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to update publication of quiz %s", quiz.id, exc_info=True)
        raise StorageError("Could not update the quiz") from exc
    return tree_from_row(db, quiz)


def delete_quiz(db: Session, quiz: Quiz) -> None:
    try:
        db.delete(quiz)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to delete quiz %s", quiz.id, exc_info=True)
        raise StorageError("Could not delete the quiz") from exc


def record_take(db: Session, quiz_id: UUID) -> None:
    try:
        db.query(Quiz).filter(Quiz.id == quiz_id).update(
            {Quiz.total_takes: Quiz.total_takes + 1}, synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to record a take for quiz %s", quiz_id, exc_info=True)
        raise StorageError("Could not record the quiz result") from exc


def _filtered(db: Session, owner_id: Optional[UUID], published_only: bool):
    query = db.query(Quiz)
    if owner_id is not None:
        query = query.filter(Quiz.owner_id == owner_id)
    if published_only:
        query = query.filter(Quiz.is_published.is_(True))
    return query


def list_quizzes(
    db: Session,
    owner_id: Optional[UUID] = None,
    published_only: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> List[Quiz]:
    return (
        _filtered(db, owner_id, published_only)
        .order_by(Quiz.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_quizzes(db: Session, owner_id: Optional[UUID] = None, published_only: bool = False) -> int:
    return _filtered(db, owner_id, published_only).count()


def owner_stats(db: Session, owner_id: UUID) -> OwnerStats:
    total, takes = (
        db.query(func.count(Quiz.id), func.coalesce(func.sum(Quiz.total_takes), 0))
        .filter(Quiz.owner_id == owner_id)
        .one()
    )
    return OwnerStats(
        total_quizzes=total,
        published_quizzes=count_quizzes(db, owner_id, published_only=True),
        total_takes=takes,
    )
