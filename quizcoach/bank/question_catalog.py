"""
Question Catalog: Multiple-Choice Question Loader.

Loads the question bank from a comma-separated catalog file:

    id,text,option0,option1,option2,option3,correctIndex,topic,difficulty

Features:
- Skips malformed rows with a line-numbered diagnostic
- Indexes questions by id and by topic
- Immutable once loaded; a new load replaces the whole catalog
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from ..diagnostics import ParseDiagnostic
from ..exceptions import CatalogLoadError

CATALOG_FIELDS = 9
OPTION_COUNT = 4
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


# =============================================================================
# Question Data Class
# =============================================================================


@dataclass(frozen=True)
class Question:
    """A single four-option question."""

    id: int
    text: str
    options: tuple[str, str, str, str]
    correct_index: int
    topic: str
    difficulty: int

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]

    def is_correct(self, chosen_index: int) -> bool:
        return chosen_index == self.correct_index

    @classmethod
    def from_fields(cls, fields: list[str]) -> Question:
        """
        Build a Question from split catalog fields.

        Args:
            fields: At least nine comma-separated values

        Returns:
            Question instance

        Raises:
            ValueError: If id, correct index or difficulty is not an
                integer, or either value is out of range
        """
        question_id = int(fields[0].strip())
        correct_index = int(fields[6].strip())
        difficulty = int(fields[8].strip())

        if not 0 <= correct_index < OPTION_COUNT:
            raise ValueError(f"correct index {correct_index} outside 0-{OPTION_COUNT - 1}")
        if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
            raise ValueError(
                f"difficulty {difficulty} outside {MIN_DIFFICULTY}-{MAX_DIFFICULTY}"
            )

        return cls(
            id=question_id,
            text=fields[1].strip(),
            options=(fields[2].strip(), fields[3].strip(), fields[4].strip(), fields[5].strip()),
            correct_index=correct_index,
            topic=fields[7].strip(),
            difficulty=difficulty,
        )


# =============================================================================
# Question Catalog
# =============================================================================


class QuestionCatalog:
    """
    Read-only set of questions keyed by id.

    Iteration yields questions in file order. When an id is declared twice
    the later row wins and a diagnostic is recorded.
    """

    def __init__(self, questions: list[Question] | None = None):
        self._by_id: dict[int, Question] = {}
        self.diagnostics: list[ParseDiagnostic] = []
        for question in questions or []:
            self._by_id.pop(question.id, None)
            self._by_id[question.id] = question

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._by_id.values())

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    def get(self, question_id: int) -> Question | None:
        return self._by_id.get(question_id)

    @property
    def topics(self) -> set[str]:
        return {q.topic for q in self._by_id.values()}

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_file(cls, path: Path | str) -> QuestionCatalog:
        """
        Load a catalog file.

        Args:
            path: Catalog CSV path

        Returns:
            QuestionCatalog with ``diagnostics`` listing skipped rows

        Raises:
            CatalogLoadError: If the file cannot be read or yields no
                valid question
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot read question catalog {path}: {e}")
            raise CatalogLoadError(f"Cannot read question catalog {path}: {e}") from e

        catalog = cls.from_lines(text.splitlines(), source=str(path))
        if not len(catalog):
            logger.error(f"Question catalog {path} contains no valid questions")
            raise CatalogLoadError(f"Question catalog {path} contains no valid questions")

        logger.info(f"Loaded {len(catalog)} questions from {path}")
        return catalog

    @classmethod
    def from_lines(cls, lines: list[str], source: str = "<catalog>") -> QuestionCatalog:
        """Parse catalog rows, collecting diagnostics instead of raising."""
        catalog = cls()

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue

            fields = line.split(",")
            if len(fields) < CATALOG_FIELDS:
                catalog._diagnose(
                    source, line_number,
                    f"expected {CATALOG_FIELDS} fields, found {len(fields)}",
                )
                continue

            try:
                question = Question.from_fields(fields)
            except ValueError as e:
                catalog._diagnose(source, line_number, f"unparseable row ({e})")
                continue

            if question.id in catalog._by_id:
                catalog._diagnose(
                    source, line_number,
                    f"duplicate question id {question.id}, replacing earlier row",
                )
                del catalog._by_id[question.id]
            catalog._by_id[question.id] = question

        return catalog

    def _diagnose(self, source: str, line_number: int, message: str) -> None:
        diagnostic = ParseDiagnostic(source, line_number, message)
        self.diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))
