"""
Unit tests for QuestionCatalog loading.

Covers the nine-field row format, line-numbered diagnostics for skipped
rows, and the fatal cases (unreadable file, no valid questions).
"""

import pytest

from quizcoach.bank.question_catalog import Question, QuestionCatalog
from quizcoach.exceptions import CatalogLoadError


class TestQuestionParsing:
    def test_parses_all_fields(self):
        catalog = QuestionCatalog.from_lines(
            ["7,Pick the LIFO structure,Queue,Stack,Tree,Graph,1,Stack,2"]
        )

        question = catalog.get(7)
        assert question == Question(
            id=7,
            text="Pick the LIFO structure",
            options=("Queue", "Stack", "Tree", "Graph"),
            correct_index=1,
            topic="Stack",
            difficulty=2,
        )
        assert question.correct_option == "Stack"
        assert question.is_correct(1) is True
        assert question.is_correct(0) is False

    def test_extra_fields_are_ignored(self):
        catalog = QuestionCatalog.from_lines(["1,t,a,b,c,d,0,Heap,4,extra,more"])
        assert catalog.get(1).topic == "Heap"
        assert catalog.diagnostics == []

    def test_blank_lines_are_ignored(self):
        catalog = QuestionCatalog.from_lines(["", "1,t,a,b,c,d,0,Heap,4", "   "])
        assert len(catalog) == 1
        assert catalog.diagnostics == []


class TestDiagnostics:
    def test_short_row_skipped_with_line_number(self):
        catalog = QuestionCatalog.from_lines(
            ["1,t,a,b,c,d,0,Heap,4", "2,too,few,fields"], source="q.csv"
        )

        assert [q.id for q in catalog] == [1]
        assert len(catalog.diagnostics) == 1
        diagnostic = catalog.diagnostics[0]
        assert diagnostic.line_number == 2
        assert diagnostic.source == "q.csv"
        assert "expected 9 fields" in diagnostic.message

    @pytest.mark.parametrize(
        "row",
        [
            "x,t,a,b,c,d,0,Heap,4",  # non-numeric id
            "1,t,a,b,c,d,two,Heap,4",  # non-numeric correct index
            "1,t,a,b,c,d,0,Heap,hard",  # non-numeric difficulty
            "1,t,a,b,c,d,4,Heap,3",  # correct index out of range
            "1,t,a,b,c,d,0,Heap,6",  # difficulty out of range
        ],
    )
    def test_invalid_row_skipped(self, row):
        catalog = QuestionCatalog.from_lines(["2,t,a,b,c,d,0,Heap,4", row])

        assert [q.id for q in catalog] == [2]
        assert [d.line_number for d in catalog.diagnostics] == [2]

    def test_duplicate_id_keeps_later_row(self):
        catalog = QuestionCatalog.from_lines(
            ["1,first,a,b,c,d,0,Heap,4", "1,second,a,b,c,d,1,Heap,4"]
        )

        assert len(catalog) == 1
        assert catalog.get(1).text == "second"
        assert "duplicate" in catalog.diagnostics[0].message

    def test_duplicate_id_takes_position_of_later_row(self):
        catalog = QuestionCatalog.from_lines([
            "1,first,a,b,c,d,0,Heap,4",
            "2,other,a,b,c,d,0,Heap,4",
            "1,again,a,b,c,d,0,Heap,4",
        ])

        assert [q.id for q in catalog] == [2, 1]
        assert catalog.get(1).text == "again"

    def test_constructor_keeps_last_duplicate_in_order(self):
        first = Question(1, "first", ("a", "b", "c", "d"), 0, "Heap", 1)
        other = Question(2, "other", ("a", "b", "c", "d"), 0, "Heap", 1)
        again = Question(1, "again", ("a", "b", "c", "d"), 0, "Heap", 1)

        catalog = QuestionCatalog([first, other, again])

        assert list(catalog) == [other, again]

    def test_diagnostics_are_logged(self, log_messages):
        QuestionCatalog.from_lines(["bad row"], source="q.csv")
        assert ("WARNING", "q.csv:1: expected 9 fields, found 1") in log_messages


class TestFromFile:
    def test_loads_file(self, data_dir):
        catalog = QuestionCatalog.from_file(data_dir / "questions.csv")

        assert len(catalog) == 3
        assert catalog.topics == {"Stack", "Queue", "Binary Tree"}

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(CatalogLoadError):
            QuestionCatalog.from_file(tmp_path / "missing.csv")

    def test_no_valid_rows_is_fatal(self, tmp_path):
        path = tmp_path / "questions.csv"
        path.write_text("bad\nalso,bad\n", encoding="utf-8")

        with pytest.raises(CatalogLoadError):
            QuestionCatalog.from_file(path)
