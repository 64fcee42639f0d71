"""
Configuration settings for quiz-coach.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZCOACH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Data Files
    # ========================================
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the catalog, graph and attempt logs",
    )
    catalog_file: str = Field(
        default="questions.csv",
        description="Question catalog file name (inside data_dir)",
    )
    knowledge_graph_file: str = Field(
        default="knowledge_graph.txt",
        description="Topic dependency file name (inside data_dir)",
    )
    records_file: str = Field(
        default="records.csv",
        description="Attempt log for the default user scope",
    )
    reports_dir: Path = Field(
        default=Path("reports"),
        description="Directory for exported Markdown reports",
    )

    # ========================================
    # Study Behaviour
    # ========================================
    recommend_count: int = Field(
        default=5,
        ge=1,
        description="Questions returned per recommendation request",
    )
    weak_accuracy_threshold: float = Field(
        default=60.0,
        ge=0.0,
        le=100.0,
        description="Topic accuracy (percent) below which a topic is weak",
    )
    default_user: str = Field(
        default="",
        description="User scope selected at startup (empty = shared log)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Loguru level for the CLI stderr sink",
    )

    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_file

    def knowledge_graph_path(self) -> Path:
        return self.data_dir / self.knowledge_graph_file

    def record_log_path(self, user_id: str = "") -> Path:
        """
        Resolve the attempt log for a user scope.

        The default (empty) scope uses ``records_file``; a named user gets
        ``records_<user>.csv`` next to it.
        """
        if not user_id:
            return self.data_dir / self.records_file
        stem = Path(self.records_file).stem
        suffix = Path(self.records_file).suffix or ".csv"
        return self.data_dir / f"{stem}_{user_id}{suffix}"

    def reports_path(self) -> Path:
        return self.reports_dir


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
