"""
quiz-coach: adaptive self-study quiz core.

Components:
- QuestionCatalog: CSV question bank
- RecordStore: append-only per-user attempt history and wrong set
- stats: per-question and per-topic statistics
- Recommender: scored top-K practice selection
- KnowledgeGraph / ReviewPlanner: prerequisite-first review paths
- QuizSession: facade tying them together
"""

from .bank.question_catalog import Question, QuestionCatalog
from .graph.knowledge_graph import KnowledgeGraph
from .graph.review_planner import MasteryLabel, ReviewPlanner, ReviewStep, TopicStanding
from .records.record_store import AttemptRecord, RecordStore
from .session import AttemptOutcome, QuizSession
from .study.recommender import RecommendationCandidate, Recommender
from .study.stats import QuestionStat, TopicStat

__version__ = "1.0.0"

__all__ = [
    # Catalog
    "Question",
    "QuestionCatalog",
    # History
    "AttemptRecord",
    "RecordStore",
    # Statistics
    "QuestionStat",
    "TopicStat",
    # Recommendation
    "Recommender",
    "RecommendationCandidate",
    # Review planning
    "KnowledgeGraph",
    "ReviewPlanner",
    "ReviewStep",
    "MasteryLabel",
    "TopicStanding",
    # Session
    "QuizSession",
    "AttemptOutcome",
]
