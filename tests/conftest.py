"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest
from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from quizcoach.config import Settings, get_settings  # noqa: E402
from quizcoach.session import QuizSession  # noqa: E402

SAMPLE_CATALOG = """\
1,What does push do?,Removes top,Reads top,Adds on top,Clears stack,2,Stack,3
2,What does enqueue do?,Adds at rear,Adds at front,Removes rear,Sorts,0,Queue,1
3,Inorder traversal of a BST gives?,Random order,Reverse order,Level order,Sorted order,3,Binary Tree,5
"""

SAMPLE_GRAPH = """\
Stack|Array
Queue|Array
Binary Tree|Stack,Queue
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(autouse=True)
def setup_logging():
    """Route loguru to stderr at DEBUG for the duration of each test."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG",
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    yield

    logger.remove()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test as (level, text) pairs."""
    messages: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda m: messages.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def data_dir(tmp_path):
    """Data directory holding the sample catalog and knowledge graph."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "questions.csv").write_text(SAMPLE_CATALOG, encoding="utf-8")
    (directory / "knowledge_graph.txt").write_text(SAMPLE_GRAPH, encoding="utf-8")
    return directory


@pytest.fixture
def settings(data_dir, tmp_path):
    """Settings pointing at the temporary data directory (no .env lookup)."""
    return Settings(_env_file=None, data_dir=data_dir, reports_dir=tmp_path / "reports")


@pytest.fixture
def session(settings):
    """A session with the sample catalog, graph and an empty history loaded."""
    quiz = QuizSession(settings)
    assert quiz.load_catalog()
    assert quiz.load_knowledge_graph()
    quiz.load_records()
    return quiz


@pytest.fixture
def env_settings(data_dir, tmp_path, monkeypatch):
    """Point the cached get_settings() at the temporary data directory."""
    monkeypatch.setenv("QUIZCOACH_DATA_DIR", str(data_dir))
    monkeypatch.setenv("QUIZCOACH_REPORTS_DIR", str(tmp_path / "reports"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
