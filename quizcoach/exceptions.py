"""Exception types raised by the quiz-coach core."""

from __future__ import annotations


class QuizCoachError(Exception):
    """Base class for quiz-coach errors."""
    pass


class CatalogLoadError(QuizCoachError):
    """Raised when the question catalog is unreadable or has no valid questions."""
    pass


class KnowledgeGraphLoadError(QuizCoachError):
    """Raised when the knowledge graph file cannot be read."""
    pass


class UnknownQuestionError(QuizCoachError, KeyError):
    """Raised when an attempt references a question id missing from the catalog."""

    def __init__(self, question_id: int):
        super().__init__(question_id)
        self.question_id = question_id

    def __str__(self) -> str:
        return f"Question {self.question_id} is not in the catalog"


class CyclicDependencyError(QuizCoachError):
    """Raised when a review path is requested through a prerequisite cycle."""

    def __init__(self, target: str, cycle: list[str]):
        self.target = target
        self.cycle = cycle
        super().__init__(
            f"Prerequisites of '{target}' contain a cycle: {' -> '.join(cycle)}"
        )


class InvalidUserIdError(QuizCoachError, ValueError):
    """Raised when a user id cannot be used as part of a log file name."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(
            f"Invalid user id {user_id!r}: use letters, digits, '_' or '-'"
        )
