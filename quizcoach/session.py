"""
Quiz Session: the core's single entry point for the presentation layer.

Owns the question catalog, the knowledge graph and the active user's
record store, and wires them to the recommender and the review planner.
All mutation goes through ``record_attempt``; everything else is a read.

Error policy:
- Catalog load failure is fatal: ``load_catalog`` returns False
- Knowledge graph load failure only disables review paths
- Malformed rows are skipped and exposed via ``diagnostics``
- A failed log write is reported on the outcome, never raised
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .bank.question_catalog import Question, QuestionCatalog
from .config import Settings, get_settings
from .diagnostics import ParseDiagnostic
from .exceptions import CatalogLoadError, KnowledgeGraphLoadError, UnknownQuestionError
from .graph.knowledge_graph import KnowledgeGraph
from .graph.review_planner import ReviewPlanner, ReviewStep, TopicStanding
from .records.record_store import AttemptRecord, RecordStore
from .study.recommender import RecommendationCandidate, Recommender
from .study.stats import (
    AttemptSummary,
    QuestionStat,
    TopicStat,
    WrongDistribution,
    build_topic_stats,
    build_wrong_distribution,
    summarize_attempts,
)


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of grading one submitted answer."""

    correct: bool
    correct_option_index: int
    saved: bool = True  # False when the durable log write failed


class QuizSession:
    """
    One learner's in-memory study session.

    Single-threaded: every call runs to completion before the next, and
    only one user scope is loaded at a time.
    """

    def __init__(self, settings: Settings | None = None, user_id: str | None = None):
        """
        Initialize an empty session.

        Nothing is read from disk until ``load_catalog``,
        ``load_knowledge_graph`` and ``load_records`` are called.

        Args:
            settings: Settings for file locations and thresholds
            user_id: Initial user scope (defaults to settings.default_user)
        """
        self.settings = settings or get_settings()
        self.catalog = QuestionCatalog()
        self.graph: KnowledgeGraph | None = None
        self.store = RecordStore(
            self.settings,
            self.settings.default_user if user_id is None else user_id,
        )
        self.recommender = Recommender()

    # =========================================================================
    # Loading
    # =========================================================================

    def load_catalog(self, path: Path | str | None = None) -> bool:
        """
        Load (and fully replace) the question catalog.

        Returns:
            False if the file is unreadable or has no valid question; the
            caller should abort the session in that case
        """
        try:
            catalog = QuestionCatalog.from_file(path or self.settings.catalog_path())
        except CatalogLoadError:
            return False
        self.catalog = catalog
        return True

    def load_knowledge_graph(self, path: Path | str | None = None) -> bool:
        """
        Load (and fully replace) the knowledge graph.

        Returns:
            False if the file is missing or unreadable; only review paths
            become unavailable
        """
        try:
            graph = KnowledgeGraph.from_file(path or self.settings.knowledge_graph_path())
        except KnowledgeGraphLoadError:
            self.graph = None
            return False
        self.graph = graph
        return True

    def load_records(self) -> int:
        """Reload the active user's attempt history from its log."""
        return self.store.reload()

    @property
    def diagnostics(self) -> list[ParseDiagnostic]:
        """Rows skipped while loading the current catalog and graph."""
        graph_diagnostics = self.graph.diagnostics if self.graph is not None else []
        return [*self.catalog.diagnostics, *graph_diagnostics]

    @property
    def user_id(self) -> str:
        return self.store.user_id

    def switch_user(self, user_id: str) -> int:
        """Drop the current user's history and load ``user_id``'s log."""
        return self.store.switch_user(user_id)

    # =========================================================================
    # Attempts
    # =========================================================================

    def record_attempt(
        self,
        question_id: int,
        chosen_option_index: int,
        elapsed_seconds: int,
        now: int | None = None,
    ) -> AttemptOutcome:
        """
        Grade an answer and append it to the history.

        Args:
            question_id: Catalog id of the answered question
            chosen_option_index: Option the learner picked (0-3)
            elapsed_seconds: Time taken; values below 1 are recorded as 1
            now: Epoch seconds for the record (defaults to the current time)

        Returns:
            AttemptOutcome with correctness and the correct option index

        Raises:
            UnknownQuestionError: If ``question_id`` is not in the catalog
        """
        question = self.catalog.get(question_id)
        if question is None:
            raise UnknownQuestionError(question_id)

        correct = question.is_correct(chosen_option_index)
        record = AttemptRecord(
            question_id=question_id,
            correct=correct,
            used_seconds=max(1, int(elapsed_seconds)),
            timestamp=int(time.time()) if now is None else now,
        )
        saved = self.store.append(record)

        return AttemptOutcome(
            correct=correct,
            correct_option_index=question.correct_index,
            saved=saved,
        )

    # =========================================================================
    # Statistics
    # =========================================================================

    def question_stats(self) -> dict[int, QuestionStat]:
        return self.store.refresh_stats()

    def topic_stats_snapshot(self) -> dict[str, TopicStat]:
        return build_topic_stats(self.store.records, self.catalog)

    def current_wrong_set(self) -> frozenset[int]:
        return self.store.wrong_set

    def overall_summary(self) -> AttemptSummary:
        return summarize_attempts(self.store.records, self.catalog)

    def wrong_distribution(self) -> WrongDistribution:
        return build_wrong_distribution(self.store.wrong_set, self.catalog)

    # =========================================================================
    # Recommendation & Review
    # =========================================================================

    def top_k_recommendations(
        self,
        k: int | None = None,
        now: int | None = None,
    ) -> list[RecommendationCandidate]:
        """Highest-need questions, scored against freshly rebuilt statistics."""
        k = self.settings.recommend_count if k is None else k
        return self.recommender.top_k(self.catalog, self.store.refresh_stats(), k, now)

    @property
    def review_path_available(self) -> bool:
        return self.graph is not None

    def _planner(self) -> ReviewPlanner:
        return ReviewPlanner(
            self.graph or KnowledgeGraph(),
            weak_threshold=self.settings.weak_accuracy_threshold,
        )

    def review_path(self, target_topic: str) -> list[ReviewStep]:
        """
        Prerequisite-first review order for ``target_topic``.

        Returns an empty list when no knowledge graph is loaded.

        Raises:
            CyclicDependencyError: If a cycle is reachable from the target
        """
        if self.graph is None:
            logger.warning("Knowledge graph not loaded; review path unavailable")
            return []
        return self._planner().plan(target_topic.strip(), self.topic_stats_snapshot())

    def next_topics(self, topic: str) -> list[str]:
        """Topics that list ``topic`` as a direct prerequisite (empty without a graph)."""
        if self.graph is None:
            return []
        return self.graph.dependents(topic.strip())

    def ranked_topics(self) -> list[TopicStanding]:
        """Graph and catalog topics, weakest accuracy first."""
        return self._planner().rank_topics(self.topic_stats_snapshot(), self.catalog.topics)

    # =========================================================================
    # Practice Selection
    # =========================================================================

    def pick_random_question(self, rng: random.Random | None = None) -> Question | None:
        questions = list(self.catalog)
        if not questions:
            return None
        return (rng or random).choice(questions)

    def pick_wrong_question(self, rng: random.Random | None = None) -> Question | None:
        """Random question from the wrong set (ids missing from the catalog are skipped)."""
        candidates = [self.catalog.get(qid) for qid in sorted(self.store.wrong_set)]
        candidates = [q for q in candidates if q is not None]
        if not candidates:
            return None
        return (rng or random).choice(candidates)

    def draw_exam(self, count: int, rng: random.Random | None = None) -> list[Question]:
        """
        Draw ``count`` distinct questions, clamped to [1, catalog size].

        Shuffles the whole catalog and keeps the first ``count``.
        """
        questions = list(self.catalog)
        if not questions:
            return []
        count = max(1, min(count, len(questions)))
        (rng or random).shuffle(questions)
        return questions[:count]

    def exam_checkpoint(self) -> int:
        """Marker for ``summarize_since``: the current history length."""
        return len(self.store)

    def summarize_since(self, checkpoint: int) -> AttemptSummary:
        """Totals for the attempts appended after ``checkpoint``."""
        return summarize_attempts(self.store.records_since(checkpoint), self.catalog)
