from uuid import UUID


class QuizcraftError(Exception):
    """Base class for errors scoped to a single save, import or score operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"detail": self.message}


class QuizValidationError(QuizcraftError):
    pass


class InvalidReferenceError(QuizValidationError):
    def __init__(self, question_index: int, answer_index: int, answer_id: UUID, personality_type_id: UUID):
        super().__init__(
            f"Answer {answer_index + 1} of question {question_index + 1} references "
            f"personality type {personality_type_id}, which is not defined on this quiz"
        )
        self.question_index = question_index
        self.answer_index = answer_index
        self.answer_id = answer_id
        self.personality_type_id = personality_type_id

    def to_detail(self) -> dict:
        return {
            "detail": self.message,
            "question_index": self.question_index,
            "answer_index": self.answer_index,
            "answer_id": str(self.answer_id),
            "personality_type_id": str(self.personality_type_id),
        }


class ImportFormatError(QuizValidationError):
    def __init__(self, reason: str = None):
        message = "Invalid quiz document"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownPersonalityTypeError(QuizValidationError):
    def __init__(self, name: str):
        super().__init__(f'Unknown personality type "{name}" referenced by an answer')
        self.name = name

    def to_detail(self) -> dict:
        return {"detail": self.message, "personality_type": self.name}


class NoResponsesError(QuizValidationError):
    def __init__(self):
        super().__init__("Quiz has no responses")


class StorageError(QuizcraftError):
    pass
