"""
Study Module for quiz-coach.

Provides:
- Attempt statistics (per question, per topic, summaries)
- Practice recommendation (scored top-K selection)
"""

from .recommender import RecommendationCandidate, RecommendConfig, Recommender
from .stats import (
    AttemptSummary,
    QuestionStat,
    TopicStat,
    WrongDistribution,
    build_question_stats,
    build_topic_stats,
    build_wrong_distribution,
    summarize_attempts,
)

__all__ = [
    "Recommender",
    "RecommendConfig",
    "RecommendationCandidate",
    "QuestionStat",
    "TopicStat",
    "AttemptSummary",
    "WrongDistribution",
    "build_question_stats",
    "build_topic_stats",
    "build_wrong_distribution",
    "summarize_attempts",
]
