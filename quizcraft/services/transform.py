"""Mapping between the normalized quiz tables and the nested quiz tree.

The tables keep quizzes, personality types, questions and answers apart,
linked by foreign keys and explicit ``order_index`` columns. The tree nests
them the way a quiz is presented: ordered questions, each with ordered
answers. This module is the only place where one shape becomes the other.
"""
import logging
from typing import Iterable, List

from quizcraft.schemas.quiz.quiz_base import AnswerBase, PersonalityTypeBase, QuestionBase, QuizTree
from quizcraft.schemas.quiz.quiz_records import (
    AnswerRecord,
    PersonalityTypeRecord,
    QuestionRecord,
    QuizRecord,
    SaveRecords,
)
from quizcraft.services.errors import InvalidReferenceError, QuizValidationError
from quizcraft.services.palette import default_color, default_icon
from quizcraft.services.slugs import is_valid_slug

logger = logging.getLogger(__name__)


def build_quiz_tree(
    quiz_record: QuizRecord,
    question_records: Iterable[QuestionRecord],
    answer_records: Iterable[AnswerRecord],
    type_records: Iterable[PersonalityTypeRecord],
) -> QuizTree:
    """Nest flat record lists (possibly spanning many quizzes) under one quiz.

    Rows belonging to other quizzes are ignored. Questions and answers come
    out sorted by ``order_index``; ties keep their input order.
    """
    quiz_id = quiz_record.id

    types = sorted((t for t in type_records if t.quiz_id == quiz_id), key=lambda t: t.position)
    questions = sorted((q for q in question_records if q.quiz_id == quiz_id), key=lambda q: q.order_index)

    answers_by_question = {q.id: [] for q in questions}
    for answer in answer_records:
        if answer.question_id in answers_by_question:
            answers_by_question[answer.question_id].append(answer)

    return QuizTree(
        id=quiz_id,
        owner_id=quiz_record.owner_id,
        title=quiz_record.title,
        description=quiz_record.description,
        slug=quiz_record.slug,
        cover_image_url=quiz_record.cover_image_url,
        is_published=quiz_record.is_published,
        total_takes=quiz_record.total_takes,
        created_at=quiz_record.created_at,
        updated_at=quiz_record.updated_at,
        personality_types=[
            PersonalityTypeBase(
                id=t.id,
                name=t.name,
                description=t.description,
                color=t.color,
                icon=t.icon,
                result_image_url=t.result_image_url,
            )
            for t in types
        ],
        questions=[
            QuestionBase(
                id=q.id,
                text=q.text,
                image_url=q.image_url,
                order_index=q.order_index,
                answers=[
                    AnswerBase(
                        id=a.id,
                        text=a.text,
                        personality_type_id=a.personality_type_id,
                        weight=a.weight,
                        order_index=a.order_index,
                    )
                    for a in sorted(answers_by_question[q.id], key=lambda a: a.order_index)
                ],
            )
            for q in questions
        ],
    )


def check_unique_ids(tree: QuizTree) -> None:
    """Types, questions and answers each need ids unique within the tree."""
    groups = (
        ("personality type", [t.id for t in tree.personality_types]),
        ("question", [q.id for q in tree.questions]),
        ("answer", [a.id for q in tree.questions for a in q.answers]),
    )
    for label, ids in groups:
        seen = set()
        for item_id in ids:
            if item_id in seen:
                raise QuizValidationError(f"Duplicate {label} id {item_id}")
            seen.add(item_id)


def check_answer_references(tree: QuizTree) -> None:
    check_unique_ids(tree)
    known = {t.id for t in tree.personality_types}
    for question_index, question in enumerate(tree.questions):
        for answer_index, answer in enumerate(question.answers):
            if answer.personality_type_id not in known:
                raise InvalidReferenceError(question_index, answer_index, answer.id, answer.personality_type_id)


def check_required_fields(tree: QuizTree) -> None:
    missing: List[str] = []
    if not tree.title.strip():
        missing.append("title")
    if not tree.description.strip():
        missing.append("description")
    for index, personality_type in enumerate(tree.personality_types):
        if not personality_type.name.strip():
            missing.append(f"personality_types[{index}].name")
    for index, question in enumerate(tree.questions):
        if not question.text.strip():
            missing.append(f"questions[{index}].text")
    if missing:
        raise QuizValidationError(f"Missing required fields: {', '.join(missing)}")
    if tree.slug is not None and not is_valid_slug(tree.slug):
        raise QuizValidationError(
            f'Invalid slug "{tree.slug}": use lowercase letters, digits and single hyphens'
        )


def validate_for_publish(tree: QuizTree) -> None:
    check_required_fields(tree)
    if not tree.questions:
        raise QuizValidationError("A published quiz needs at least one question")
    if not tree.personality_types:
        raise QuizValidationError("A published quiz needs at least one personality type")
    check_answer_references(tree)


def build_save_records(tree: QuizTree) -> SaveRecords:
    """Flatten a quiz tree into records, re-deriving order indices from list positions.

    Raises InvalidReferenceError, without producing anything, when an answer
    points at a personality type the quiz does not define.
    """
    check_answer_references(tree)

    questions = []
    answers = []
    for question_index, question in enumerate(tree.questions):
        questions.append(
            QuestionRecord(
                id=question.id,
                quiz_id=tree.id,
                text=question.text,
                image_url=question.image_url,
                order_index=question_index,
            )
        )
        for answer_index, answer in enumerate(question.answers):
            answers.append(
                AnswerRecord(
                    id=answer.id,
                    question_id=question.id,
                    personality_type_id=answer.personality_type_id,
                    text=answer.text,
                    weight=answer.weight,
                    order_index=answer_index,
                )
            )

    records = SaveRecords(
        quiz=QuizRecord(
            id=tree.id,
            owner_id=tree.owner_id,
            title=tree.title,
            description=tree.description,
            slug=tree.slug,
            cover_image_url=tree.cover_image_url,
            is_published=tree.is_published,
            total_takes=tree.total_takes,
            created_at=tree.created_at,
            updated_at=tree.updated_at,
        ),
        personality_types=[
            PersonalityTypeRecord(
                id=t.id,
                quiz_id=tree.id,
                name=t.name,
                description=t.description,
                color=t.color or default_color(position),
                icon=t.icon or default_icon(position),
                result_image_url=t.result_image_url,
                position=position,
            )
            for position, t in enumerate(tree.personality_types)
        ],
        questions=questions,
        answers=answers,
    )
    logger.debug(
        "Flattened quiz %s into %d types, %d questions, %d answers",
        tree.id, len(records.personality_types), len(questions), len(answers),
    )
    return records
