"""
Attempt Statistics for quiz-coach.

Pure folds over the attempt history:
- Per-question totals, correct count, time spent and last attempt time
- Per-topic totals and accuracy (joined through the question catalog)
- Whole-history and exam-window summaries
- Wrong-set distribution by topic and difficulty

Every function is a deterministic function of its arguments. Nothing is
cached or updated incrementally, so statistics can always be rebuilt from
the records alone.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..bank.question_catalog import QuestionCatalog
    from ..records.record_store import AttemptRecord


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class QuestionStat:
    """Aggregate of all attempts on one question."""

    total_attempts: int = 0
    correct_attempts: int = 0
    total_time_seconds: int = 0
    last_timestamp: int = 0  # 0 = never attempted

    @property
    def wrong_attempts(self) -> int:
        return self.total_attempts - self.correct_attempts

    @property
    def average_seconds(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.total_time_seconds / self.total_attempts


@dataclass
class TopicStat:
    """Aggregate of all attempts on the questions of one topic."""

    total: int = 0
    correct: int = 0
    accuracy: float = 0.0  # percent, 0 when total == 0


@dataclass
class AttemptSummary:
    """Totals over a run of attempts (whole history or one exam)."""

    total: int = 0
    correct: int = 0
    accuracy: float = 0.0
    topics: dict[str, TopicStat] = field(default_factory=dict)

    @property
    def wrong(self) -> int:
        return self.total - self.correct


@dataclass
class WrongDistribution:
    """Currently-wrong questions counted by topic and by difficulty."""

    by_topic: dict[str, int] = field(default_factory=dict)
    by_difficulty: dict[int, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.by_topic.values())


# =============================================================================
# Folds
# =============================================================================


def accuracy_percent(correct: int, total: int) -> float:
    return correct * 100.0 / total if total > 0 else 0.0


def build_question_stats(records: Iterable[AttemptRecord]) -> dict[int, QuestionStat]:
    """
    Group attempts by question and fold counts, time and latest timestamp.

    Args:
        records: Attempts in any order

    Returns:
        Dict of question_id -> QuestionStat (only attempted questions appear)
    """
    stats: dict[int, QuestionStat] = {}
    for record in records:
        stat = stats.setdefault(record.question_id, QuestionStat())
        stat.total_attempts += 1
        if record.correct:
            stat.correct_attempts += 1
        stat.total_time_seconds += record.used_seconds
        if record.timestamp > stat.last_timestamp:
            stat.last_timestamp = record.timestamp
    return stats


def build_topic_stats(
    records: Iterable[AttemptRecord],
    catalog: QuestionCatalog,
) -> dict[str, TopicStat]:
    """
    Fold attempts per topic.

    Attempts whose question is not in the catalog are dropped. Accuracy is
    computed in a second pass once all counts are known.

    Args:
        records: Attempts in any order
        catalog: Catalog used to resolve each attempt's topic

    Returns:
        Dict of topic -> TopicStat (only topics with resolvable attempts)
    """
    stats: dict[str, TopicStat] = {}
    for record in records:
        question = catalog.get(record.question_id)
        if question is None:
            continue
        stat = stats.setdefault(question.topic, TopicStat())
        stat.total += 1
        if record.correct:
            stat.correct += 1

    for stat in stats.values():
        stat.accuracy = accuracy_percent(stat.correct, stat.total)

    return stats


def summarize_attempts(
    records: Iterable[AttemptRecord],
    catalog: QuestionCatalog,
) -> AttemptSummary:
    """Overall totals plus the per-topic breakdown for a run of attempts."""
    records = list(records)
    correct = sum(1 for r in records if r.correct)
    return AttemptSummary(
        total=len(records),
        correct=correct,
        accuracy=accuracy_percent(correct, len(records)),
        topics=build_topic_stats(records, catalog),
    )


def build_wrong_distribution(
    wrong_ids: Iterable[int],
    catalog: QuestionCatalog,
) -> WrongDistribution:
    """Count wrong-set questions per topic and per difficulty, sorted by key."""
    by_topic: dict[str, int] = {}
    by_difficulty: dict[int, int] = {}
    for qid in wrong_ids:
        question = catalog.get(qid)
        if question is None:
            continue
        by_topic[question.topic] = by_topic.get(question.topic, 0) + 1
        by_difficulty[question.difficulty] = by_difficulty.get(question.difficulty, 0) + 1

    return WrongDistribution(
        by_topic=dict(sorted(by_topic.items())),
        by_difficulty=dict(sorted(by_difficulty.items())),
    )
