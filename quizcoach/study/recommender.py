"""
Practice Recommender.

Ranks every catalog question by how much it needs review and returns the
top K. The score combines:
- Error rate (never-attempted questions count as fully wrong)
- Time since the last attempt, saturating at one week
- Difficulty, mapped from 1..5 onto 0.2..1.0
- A flat bonus for questions never attempted

    score = 0.6 * errorRate + 0.3 * timeScore + 0.1 * difficultyScore + unseenBonus

clamped to [0, 2]. Equal scores are ordered by ascending question id.
"""

from __future__ import annotations

import heapq
import time
from dataclasses import dataclass

from loguru import logger

from ..bank.question_catalog import Question, QuestionCatalog
from .stats import QuestionStat

SECONDS_PER_DAY = 86400


@dataclass
class RecommendConfig:
    """Weights and bounds for the recommendation score."""

    error_weight: float = 0.6
    time_weight: float = 0.3
    difficulty_weight: float = 0.1
    unseen_bonus: float = 0.2
    unseen_gap_days: float = 7.0  # assumed gap for never-attempted questions
    saturation_days: float = 7.0  # gap at which the time score reaches 1.0
    min_score: float = 0.0
    max_score: float = 2.0


@dataclass(frozen=True)
class RecommendationCandidate:
    """A scored question produced for one recommendation request."""

    question_id: int
    score: float


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class Recommender:
    """
    Scores questions and selects the highest-scoring ones.

    Selection keeps a bounded heap of the K best candidates, so a request
    costs O(N log K) for a catalog of N questions.
    """

    def __init__(self, config: RecommendConfig | None = None):
        self.config = config or RecommendConfig()

    def score(self, question: Question, stat: QuestionStat | None, now: int) -> float:
        """
        Compute the review-need score for one question.

        Args:
            question: Catalog question
            stat: Its attempt statistics (None or empty = never attempted)
            now: Current time in epoch seconds

        Returns:
            Score in [0.0, 2.0]
        """
        cfg = self.config
        stat = stat or QuestionStat()

        if stat.total_attempts > 0:
            error_rate = stat.wrong_attempts / stat.total_attempts
        else:
            error_rate = 1.0

        if stat.last_timestamp > 0:
            days_since_last = max(0, now - stat.last_timestamp) / SECONDS_PER_DAY
        else:
            days_since_last = cfg.unseen_gap_days

        time_score = min(days_since_last / cfg.saturation_days, 1.0)
        difficulty_score = _clamp(0.2 + (question.difficulty - 1) * 0.2, 0.2, 1.0)
        bonus = cfg.unseen_bonus if stat.total_attempts == 0 else 0.0

        raw = (
            cfg.error_weight * error_rate
            + cfg.time_weight * time_score
            + cfg.difficulty_weight * difficulty_score
            + bonus
        )
        return _clamp(raw, cfg.min_score, cfg.max_score)

    def top_k(
        self,
        catalog: QuestionCatalog,
        stats: dict[int, QuestionStat],
        k: int,
        now: int | None = None,
    ) -> list[RecommendationCandidate]:
        """
        Select the K highest-scoring questions.

        Args:
            catalog: Questions to rank
            stats: Fresh per-question statistics
            k: Number requested (capped at the catalog size)
            now: Epoch seconds (defaults to the current time)

        Returns:
            Candidates in descending score order, ties by ascending id
        """
        if now is None:
            now = int(time.time())
        k = min(k, len(catalog))
        if k <= 0:
            return []

        # Min-heap of the best K so far; the root is the weakest kept
        # candidate: lowest score, then highest id.
        heap: list[tuple[float, int]] = []
        for question in catalog:
            entry = (self.score(question, stats.get(question.id), now), -question.id)
            if len(heap) < k:
                heapq.heappush(heap, entry)
            elif entry > heap[0]:
                heapq.heapreplace(heap, entry)

        ranked = sorted(heap, reverse=True)
        selected = [RecommendationCandidate(-neg_id, score) for score, neg_id in ranked]

        logger.debug(
            f"Recommended {[c.question_id for c in selected]} from {len(catalog)} questions"
        )
        return selected
