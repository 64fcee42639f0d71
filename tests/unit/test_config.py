"""
Unit tests for Settings and get_settings().
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from quizcoach.config import Settings, get_settings


class TestDefaults:
    def test_default_paths(self):
        settings = Settings(_env_file=None)

        assert settings.catalog_path() == Path("data") / "questions.csv"
        assert settings.knowledge_graph_path() == Path("data") / "knowledge_graph.txt"
        assert settings.reports_path() == Path("reports")
        assert settings.recommend_count == 5
        assert settings.weak_accuracy_threshold == 60.0

    def test_record_log_path_per_user(self, tmp_path):
        settings = Settings(_env_file=None, data_dir=tmp_path)

        assert settings.record_log_path() == tmp_path / "records.csv"
        assert settings.record_log_path("bob") == tmp_path / "records_bob.csv"

    def test_custom_records_file(self, tmp_path):
        settings = Settings(_env_file=None, data_dir=tmp_path, records_file="history.log")
        assert settings.record_log_path("bob") == tmp_path / "history_bob.log"


class TestEnvironment:
    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("QUIZCOACH_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("QUIZCOACH_RECOMMEND_COUNT", "8")

        settings = Settings(_env_file=None)

        assert settings.data_dir == tmp_path
        assert settings.recommend_count == 8

    def test_invalid_count_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, recommend_count=0)

    def test_get_settings_is_cached(self, env_settings):
        assert get_settings() is env_settings
