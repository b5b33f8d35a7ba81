"""Import and export of quiz documents.

A quiz document is the JSON shape authors exchange outside the service::

    {
      "title": "...", "description": "...", "slug": "optional",
      "personalityTypes": [{"name", "description", "color", "icon", "resultImageUrl"?}],
      "questions": [{"text", "imageUrl"?, "answers": [{"text", "personalityType", "weight"}]}]
    }

Answers point at personality types by *name*. Importing swaps those names
for freshly generated identifiers; any name that does not match a declared
type rejects the whole document.
"""
import json
import logging
from typing import Dict, Union
from uuid import UUID, uuid4

from pydantic import ValidationError

from quizcraft.schemas.quiz.quiz_base import AnswerBase, PersonalityTypeBase, QuestionBase, QuizTree
from quizcraft.schemas.quiz.quiz_import import (
    ImportAnswer,
    ImportDocument,
    ImportPersonalityType,
    ImportQuestion,
)
from quizcraft.services.errors import ImportFormatError, UnknownPersonalityTypeError

logger = logging.getLogger(__name__)


def parse_import_document(raw: Union[bytes, str, dict]) -> ImportDocument:
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ImportFormatError("not valid JSON") from exc

    if not isinstance(raw, dict):
        raise ImportFormatError("expected a JSON object")

    try:
        return ImportDocument.model_validate(raw)
    except ValidationError as exc:
        logger.info("Rejected quiz document: %s", exc.errors(include_url=False))
        raise ImportFormatError("expected title, description, questions and personalityTypes") from exc


def reconcile_import(document: ImportDocument) -> QuizTree:
    type_ids: Dict[str, UUID] = {}
    personality_types = []
    for declared in document.personality_types:
        personality_type = PersonalityTypeBase(
            id=uuid4(),
            name=declared.name,
            description=declared.description,
            color=declared.color,
            icon=declared.icon,
            result_image_url=declared.result_image_url,
        )
        # a repeated name resolves to its first declaration
        type_ids.setdefault(declared.name, personality_type.id)
        personality_types.append(personality_type)

    questions = []
    for question_index, declared in enumerate(document.questions):
        answers = []
        for answer_index, declared_answer in enumerate(declared.answers):
            type_id = type_ids.get(declared_answer.personality_type)
            if type_id is None:
                raise UnknownPersonalityTypeError(declared_answer.personality_type)
            answers.append(
                AnswerBase(
                    id=uuid4(),
                    text=declared_answer.text,
                    personality_type_id=type_id,
                    weight=declared_answer.weight,
                    order_index=answer_index,
                )
            )
        questions.append(
            QuestionBase(
                id=uuid4(),
                text=declared.text,
                image_url=declared.image_url,
                order_index=question_index,
                answers=answers,
            )
        )

    return QuizTree(
        title=document.title,
        description=document.description,
        slug=document.slug,
        personality_types=personality_types,
        questions=questions,
    )


def import_quiz(raw: Union[bytes, str, dict]) -> QuizTree:
    return reconcile_import(parse_import_document(raw))


def export_quiz_document(tree: QuizTree) -> dict:
    names = {t.id: t.name for t in tree.personality_types}
    document = ImportDocument(
        title=tree.title,
        description=tree.description,
        slug=tree.slug,
        personality_types=[
            ImportPersonalityType(
                name=t.name,
                description=t.description,
                color=t.color,
                icon=t.icon,
                result_image_url=t.result_image_url,
            )
            for t in tree.personality_types
        ],
        questions=[
            ImportQuestion(
                text=q.text,
                image_url=q.image_url,
                answers=[
                    ImportAnswer(
                        text=a.text,
                        personality_type=names.get(a.personality_type_id, str(a.personality_type_id)),
                        weight=a.weight,
                    )
                    for a in q.answers
                ],
            )
            for q in tree.questions
        ],
    )
    return document.model_dump(by_alias=True, exclude_none=True)
