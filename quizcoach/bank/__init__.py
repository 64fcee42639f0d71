"""Question bank loading."""

from .question_catalog import Question, QuestionCatalog

__all__ = ["Question", "QuestionCatalog"]
