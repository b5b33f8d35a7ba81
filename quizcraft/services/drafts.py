import logging
from typing import List, Optional, Union
from uuid import UUID

from quizcraft.schemas.quiz.quiz_base import PersonalityTypeBase, QuestionBase, QuizTree
from quizcraft.services.importer import import_quiz

logger = logging.getLogger(__name__)


class QuizDraft:
    """Authoring state for one quiz while it is being edited."""

    def __init__(
        self,
        title: str = "",
        description: str = "",
        slug: Optional[str] = None,
        cover_image_url: Optional[str] = None,
        personality_types: List[PersonalityTypeBase] = None,
        questions: List[QuestionBase] = None,
        quiz_id: Optional[UUID] = None,
        owner_id: Optional[UUID] = None,
        is_published: bool = False,
    ):
        self.title = title
        self.description = description
        self.slug = slug
        self.cover_image_url = cover_image_url
        self.personality_types = personality_types or []
        self.questions = questions or []
        self.quiz_id = quiz_id
        self.owner_id = owner_id
        self.is_published = is_published

    @classmethod
    def from_tree(cls, tree: QuizTree) -> "QuizDraft":
        copy = tree.model_copy(deep=True)
        return cls(
            title=copy.title,
            description=copy.description,
            slug=copy.slug,
            cover_image_url=copy.cover_image_url,
            personality_types=copy.personality_types,
            questions=copy.questions,
            quiz_id=copy.id,
            owner_id=copy.owner_id,
            is_published=copy.is_published,
        )

    def to_tree(self) -> QuizTree:
        fields = dict(
            title=self.title,
            description=self.description,
            slug=self.slug,
            cover_image_url=self.cover_image_url,
            personality_types=[t.model_copy(deep=True) for t in self.personality_types],
            questions=[q.model_copy(deep=True) for q in self.questions],
            owner_id=self.owner_id,
            is_published=self.is_published,
        )
        if self.quiz_id is not None:
            fields["id"] = self.quiz_id
        return QuizTree(**fields)

    def apply_import(self, raw: Union[bytes, str, dict]) -> None:
        """Replace title, description, slug, types and questions from a quiz document.

        Nothing changes unless the whole document reconciles.
        """
        imported = import_quiz(raw)

        self.title = imported.title
        self.description = imported.description
        self.slug = imported.slug
        self.personality_types = imported.personality_types
        self.questions = imported.questions
        logger.info(
            "Imported %d questions and %d personality types into draft %s",
            len(self.questions), len(self.personality_types), self.quiz_id,
        )
