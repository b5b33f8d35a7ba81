import logging
from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from quizcraft.schemas.quiz.quiz_base import QuizTree
from quizcraft.schemas.quiz.quiz_play import QuizResponse, QuizResult
from quizcraft.services.errors import InvalidReferenceError, NoResponsesError, QuizValidationError
from quizcraft.services.transform import check_unique_ids

logger = logging.getLogger(__name__)


def tally_scores(quiz: QuizTree, responses: Sequence[QuizResponse]) -> Tuple[Dict[UUID, float], List[QuizResponse]]:
    """Sum answer weights per personality type.

    Every type starts at zero, in declaration order. Responses naming a
    question or answer the quiz no longer has are skipped and returned.
    """
    check_unique_ids(quiz)
    scores: Dict[UUID, float] = {t.id: 0 for t in quiz.personality_types}
    skipped: List[QuizResponse] = []

    for response in responses:
        question = quiz.find_question(response.question_id)
        answer = None
        if question is not None:
            answer = next((a for a in question.answers if a.id == response.answer_id), None)
        if answer is None:
            skipped.append(response)
            continue

        if answer.personality_type_id not in scores:
            question_index = quiz.questions.index(question)
            raise InvalidReferenceError(
                question_index, question.answers.index(answer), answer.id, answer.personality_type_id
            )
        scores[answer.personality_type_id] += answer.weight

    if skipped:
        logger.info("Skipped %d stale responses while scoring quiz %s", len(skipped), quiz.id)
    return scores, skipped


def score_quiz(quiz: QuizTree, responses: Sequence[QuizResponse], require_responses: bool = False) -> QuizResult:
    """Pick the personality type with the highest total.

    Ties go to the type declared first. With no responses every score is
    zero, so the first-declared type wins unless ``require_responses`` is set.
    """
    if not quiz.personality_types:
        raise QuizValidationError("Quiz has no personality types to score against")
    if require_responses and not responses:
        raise NoResponsesError()

    scores, skipped = tally_scores(quiz, responses)

    # max() keeps the first maximum it meets, and scores is in declaration order
    winner_id = max(scores, key=scores.get)
    winner = quiz.find_personality_type(winner_id)

    return QuizResult(
        result=winner,
        scores=scores,
        skipped=skipped,
        share_text=f'I got "{winner.name}" in {quiz.title}! {winner.description}',
    )
