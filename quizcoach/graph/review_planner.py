"""
Review Path Planner.

Turns a target topic into a prerequisite-first study order and annotates
each step with the learner's mastery state:
- "needs study": topic never practiced
- "weak": accuracy below the threshold (60% by default)
- no label otherwise

Also ranks all known topics weakest-first for target selection.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from ..exceptions import CyclicDependencyError
from ..study.stats import TopicStat
from .knowledge_graph import KnowledgeGraph


class MasteryLabel(str, Enum):
    NEEDS_STUDY = "needs study"
    WEAK = "weak"


@dataclass(frozen=True)
class ReviewStep:
    """One topic in a review path."""

    topic: str
    label: MasteryLabel | None
    stat: TopicStat | None = None


@dataclass(frozen=True)
class TopicStanding:
    """A topic's practice totals, for weakest-first listings."""

    topic: str
    total: int
    correct: int
    accuracy: float

    @property
    def practiced(self) -> bool:
        return self.total > 0


class ReviewPlanner:
    """Plans review order over a knowledge graph. Holds no per-call state."""

    def __init__(self, graph: KnowledgeGraph, weak_threshold: float = 60.0):
        self.graph = graph
        self.weak_threshold = weak_threshold

    def label_for(self, stat: TopicStat | None) -> MasteryLabel | None:
        if stat is None or stat.total == 0:
            return MasteryLabel.NEEDS_STUDY
        if stat.accuracy < self.weak_threshold:
            return MasteryLabel.WEAK
        return None

    def plan(self, target: str, topic_stats: dict[str, TopicStat]) -> list[ReviewStep]:
        """
        Build the annotated review path for ``target``.

        Args:
            target: Topic to work towards
            topic_stats: Current per-topic statistics

        Returns:
            Steps in prerequisite-first order ending with ``target``

        Raises:
            CyclicDependencyError: If a cycle is reachable from ``target``
        """
        cycle = self.graph.find_cycle(source=target)
        if cycle:
            raise CyclicDependencyError(target, cycle)

        steps = [
            ReviewStep(topic, self.label_for(topic_stats.get(topic)), topic_stats.get(topic))
            for topic in self.graph.dfs_postorder(target)
        ]
        logger.debug(f"Review path for '{target}': {[s.topic for s in steps]}")
        return steps

    def rank_topics(
        self,
        topic_stats: dict[str, TopicStat],
        extra_topics: Iterable[str] = (),
    ) -> list[TopicStanding]:
        """
        List graph topics (plus ``extra_topics``) weakest-first.

        Unpracticed topics count as 0% accuracy. Ties are broken by name.
        """
        names = set(self.graph.topics) | set(extra_topics)
        standings = []
        for name in names:
            stat = topic_stats.get(name) or TopicStat()
            standings.append(TopicStanding(name, stat.total, stat.correct, stat.accuracy))
        return sorted(standings, key=lambda s: (s.accuracy, s.topic))
