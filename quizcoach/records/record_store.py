"""
Attempt Record Store for quiz-coach.

Provides the append-only attempt history for one user scope:
- In-memory list of attempts in insertion order
- Per-question attempt index
- The wrong set: questions whose most recently recorded attempt was wrong
- Durable append to a per-user CSV log

Log format (one attempt per line):

    questionId,correct(0|1),usedSeconds,timestamp

Recency is insertion order, not timestamp order. If the log holds attempts
out of clock order the wrong set still follows the last recorded line.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..config import Settings, get_settings
from ..exceptions import InvalidUserIdError
from ..study.stats import QuestionStat, build_question_stats

LOG_FIELDS = 4

# User ids become part of the log file name: no separators or dots.
USER_ID_PATTERN = re.compile(r"[\w-]*")

# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class AttemptRecord:
    """A single submission event for one question."""

    question_id: int
    correct: bool
    used_seconds: int
    timestamp: int  # epoch seconds

    def to_line(self) -> str:
        """Serialize to one attempt-log line (without newline)."""
        return f"{self.question_id},{1 if self.correct else 0},{self.used_seconds},{self.timestamp}"

    @classmethod
    def from_line(cls, line: str) -> AttemptRecord:
        """
        Parse one attempt-log line.

        Raises:
            ValueError: If the line has fewer than four fields, a non-integer
                field, a correctness flag other than 0/1, or usedSeconds < 1
        """
        fields = line.strip().split(",")
        if len(fields) < LOG_FIELDS:
            raise ValueError(f"expected {LOG_FIELDS} fields, found {len(fields)}")

        flag = fields[1].strip()
        if flag not in ("0", "1"):
            raise ValueError(f"correct flag must be 0 or 1, got {flag!r}")

        used_seconds = int(fields[2])
        if used_seconds < 1:
            raise ValueError(f"usedSeconds must be >= 1, got {used_seconds}")

        return cls(
            question_id=int(fields[0]),
            correct=flag == "1",
            used_seconds=used_seconds,
            timestamp=int(fields[3]),
        )


def validate_user_id(user_id: str) -> str:
    """
    Check that ``user_id`` is safe to embed in a log file name.

    Returns:
        The unchanged user id ("" is the shared default scope)

    Raises:
        InvalidUserIdError: If it contains anything but word characters or '-'
    """
    if not USER_ID_PATTERN.fullmatch(user_id):
        raise InvalidUserIdError(user_id)
    return user_id


# =============================================================================
# Record Store
# =============================================================================


class RecordStore:
    """
    Append-only attempt history for the active user scope.

    Handles:
    - Append with O(1) wrong-set maintenance
    - Full reload from the scope's log file
    - User switching (drop all state, reload the new scope)

    In-memory state is authoritative for the running session: a failed
    durable write is logged and reported but never rolls back an append.
    """

    def __init__(self, settings: Settings | None = None, user_id: str = ""):
        """
        Initialize an empty store bound to a user scope.

        Call ``reload()`` to read the scope's existing log.

        Args:
            settings: Settings used to resolve log paths (defaults to get_settings())
            user_id: Active user scope ("" selects the shared default log)

        Raises:
            InvalidUserIdError: If ``user_id`` is not a plain name
        """
        self.settings = settings or get_settings()
        self._user_id = validate_user_id(user_id.strip())
        self._records: list[AttemptRecord] = []
        self._by_question: dict[int, list[AttemptRecord]] = defaultdict(list)
        self._wrong: set[int] = set()
        self.question_stats: dict[int, QuestionStat] = {}

    # =========================================================================
    # Scope
    # =========================================================================

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def log_path(self) -> Path:
        return self.settings.record_log_path(self._user_id)

    def switch_user(self, user_id: str) -> int:
        """
        Make ``user_id`` the active scope and reload from its log.

        No record of the previous scope survives the switch.

        Returns:
            Number of records loaded for the new scope

        Raises:
            InvalidUserIdError: If ``user_id`` is not a plain name (the
                current scope is kept)
        """
        user_id = validate_user_id(user_id.strip())
        logger.info(f"Switching record scope to '{user_id or 'default'}'")
        self._user_id = user_id
        return self.reload()

    # =========================================================================
    # Queries
    # =========================================================================

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[AttemptRecord, ...]:
        """All attempts in insertion order."""
        return tuple(self._records)

    def records_for(self, question_id: int) -> tuple[AttemptRecord, ...]:
        return tuple(self._by_question.get(question_id, ()))

    def records_since(self, start: int) -> tuple[AttemptRecord, ...]:
        """Attempts appended after the store held ``start`` records."""
        return tuple(self._records[start:])

    @property
    def wrong_set(self) -> frozenset[int]:
        return frozenset(self._wrong)

    # =========================================================================
    # Mutation
    # =========================================================================

    def append(self, record: AttemptRecord) -> bool:
        """
        Record a new attempt.

        Updates the in-memory list, the per-question index and the wrong
        set, then appends the record to the scope's log.

        Args:
            record: The attempt to add

        Returns:
            True if the durable write succeeded, False if it failed
            (the in-memory update is kept either way)
        """
        self._records.append(record)
        self._by_question[record.question_id].append(record)

        if record.correct:
            self._wrong.discard(record.question_id)
        else:
            self._wrong.add(record.question_id)

        return self._write(record)

    def _write(self, record: AttemptRecord) -> bool:
        path = self.log_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(record.to_line() + "\n")
        except OSError as e:
            logger.warning(f"Could not append attempt to {path}: {e}")
            return False
        return True

    def clear(self) -> None:
        """Drop all in-memory state for the current scope (the log is untouched)."""
        self._records.clear()
        self._by_question.clear()
        self._wrong.clear()
        self.question_stats = {}

    def reload(self) -> int:
        """
        Rebuild all in-memory state from the scope's log.

        Malformed lines are skipped. A missing log is a fresh scope, not an
        error. The wrong set is rebuilt from the last record per question
        and question statistics are refreshed once.

        Returns:
            Number of records loaded
        """
        self.clear()
        path = self.log_path

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No attempt log at {path}, starting with empty history")
            return 0
        except OSError as e:
            logger.warning(f"Could not read attempt log {path}: {e}")
            return 0

        skipped = 0
        for line_number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                record = AttemptRecord.from_line(line)
            except ValueError as e:
                skipped += 1
                logger.debug(f"{path}:{line_number}: skipped attempt line ({e})")
                continue
            self._records.append(record)
            self._by_question[record.question_id].append(record)

        self._wrong = {
            qid for qid, attempts in self._by_question.items() if not attempts[-1].correct
        }
        self.refresh_stats()

        logger.info(
            f"Loaded {len(self._records)} attempts from {path} "
            f"({skipped} skipped, {len(self._wrong)} currently wrong)"
        )
        return len(self._records)

    def refresh_stats(self) -> dict[int, QuestionStat]:
        """Recompute per-question statistics from the full history."""
        self.question_stats = build_question_stats(self._records)
        return self.question_stats
