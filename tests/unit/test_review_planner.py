"""
Unit tests for ReviewPlanner labels, paths and topic ranking.
"""

import pytest

from quizcoach.exceptions import CyclicDependencyError
from quizcoach.graph.knowledge_graph import KnowledgeGraph
from quizcoach.graph.review_planner import MasteryLabel, ReviewPlanner
from quizcoach.study.stats import TopicStat


@pytest.fixture
def planner():
    graph = KnowledgeGraph.from_lines(["Stack|Array", "Queue|Array", "Binary Tree|Stack,Queue"])
    return ReviewPlanner(graph)


class TestLabels:
    @pytest.mark.parametrize(
        "stat, expected",
        [
            (None, MasteryLabel.NEEDS_STUDY),
            (TopicStat(0, 0, 0.0), MasteryLabel.NEEDS_STUDY),
            (TopicStat(10, 5, 50.0), MasteryLabel.WEAK),
            (TopicStat(5, 2, 40.0), MasteryLabel.WEAK),
            (TopicStat(5, 3, 60.0), None),
            (TopicStat(4, 4, 100.0), None),
        ],
    )
    def test_label_for(self, planner, stat, expected):
        assert planner.label_for(stat) == expected

    def test_custom_threshold(self):
        planner = ReviewPlanner(KnowledgeGraph(), weak_threshold=80.0)
        assert planner.label_for(TopicStat(10, 7, 70.0)) == MasteryLabel.WEAK

    def test_label_values(self):
        assert MasteryLabel.NEEDS_STUDY.value == "needs study"
        assert MasteryLabel.WEAK.value == "weak"


class TestPlan:
    def test_annotated_path(self, planner):
        stats = {
            "Array": TopicStat(4, 4, 100.0),
            "Stack": TopicStat(10, 5, 50.0),
        }

        steps = planner.plan("Binary Tree", stats)

        assert [s.topic for s in steps] == ["Array", "Stack", "Queue", "Binary Tree"]
        assert [s.label for s in steps] == [
            None,
            MasteryLabel.WEAK,
            MasteryLabel.NEEDS_STUDY,
            MasteryLabel.NEEDS_STUDY,
        ]
        assert steps[1].stat == TopicStat(10, 5, 50.0)
        assert steps[2].stat is None

    def test_leaf_target(self, planner):
        steps = planner.plan("Array", {})
        assert [(s.topic, s.label) for s in steps] == [("Array", MasteryLabel.NEEDS_STUDY)]

    def test_cycle_reachable_from_target_raises(self):
        graph = KnowledgeGraph.from_lines(["A|B", "B|A", "C|D"])
        planner = ReviewPlanner(graph)

        with pytest.raises(CyclicDependencyError) as exc_info:
            planner.plan("A", {})

        assert exc_info.value.target == "A"
        assert exc_info.value.cycle[0] == exc_info.value.cycle[-1]
        assert "cycle" in str(exc_info.value)

    def test_cycle_elsewhere_does_not_block(self):
        graph = KnowledgeGraph.from_lines(["A|B", "B|A", "C|D"])
        steps = ReviewPlanner(graph).plan("C", {})
        assert [s.topic for s in steps] == ["D", "C"]


class TestRankTopics:
    def test_weakest_first_with_unpracticed_as_zero(self, planner):
        stats = {
            "Array": TopicStat(4, 4, 100.0),
            "Stack": TopicStat(10, 5, 50.0),
            "Queue": TopicStat(2, 0, 0.0),
        }

        standings = planner.rank_topics(stats)

        assert [s.topic for s in standings] == ["Binary Tree", "Queue", "Stack", "Array"]
        assert standings[0].practiced is False
        assert standings[1].practiced is True

    def test_extra_topics_included(self, planner):
        standings = planner.rank_topics({}, extra_topics={"Graph", "Stack"})
        assert [s.topic for s in standings] == ["Array", "Binary Tree", "Graph", "Queue", "Stack"]
