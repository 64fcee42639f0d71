"""Topic dependency graph and review planning."""

from .knowledge_graph import KnowledgeGraph
from .review_planner import MasteryLabel, ReviewPlanner, ReviewStep, TopicStanding

__all__ = [
    "KnowledgeGraph",
    "ReviewPlanner",
    "ReviewStep",
    "MasteryLabel",
    "TopicStanding",
]
