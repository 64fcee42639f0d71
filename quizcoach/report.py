"""
Markdown learning report for the active user.

Sections:
- Overview (attempts, correct, wrong, accuracy, current wrong questions)
- Per-topic attempts and accuracy
- Wrong-question distribution by topic and difficulty, with average answer time per wrong question
- Review advice for weak topics

Files are written to ``<reports_dir>/report_<user>_<YYYYMMDD_HHMM>.md``.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .session import QuizSession

DEFAULT_USER_LABEL = "default"


def render_report(session: QuizSession, generated_at: datetime) -> str:
    """
    Render the learning report as Markdown.

    Args:
        session: Session whose catalog and history are reported
        generated_at: Timestamp shown in the header

    Returns:
        Markdown document text
    """
    user = session.user_id or DEFAULT_USER_LABEL
    summary = session.overall_summary()
    wrong = session.current_wrong_set()
    threshold = session.settings.weak_accuracy_threshold

    lines = [
        "# Learning Report",
        "",
        f"**User**: {user}",
        "",
        f"**Generated**: {generated_at:%Y-%m-%d %H:%M:%S}",
        "",
        f"**Data source**: `{session.store.log_path}`",
        "",
        "---",
        "",
        "## Overview",
        "",
    ]

    if summary.total == 0:
        lines += ["> No attempts recorded yet for this user.", ""]
    else:
        lines += [
            "| Metric | Value |",
            "|--------|-------|",
            f"| Attempts | {summary.total} |",
            f"| Correct | {summary.correct} |",
            f"| Wrong | {summary.wrong} |",
            f"| Accuracy | {summary.accuracy:.1f}% |",
            f"| Currently wrong questions | {len(wrong)} |",
            "",
            "## Topics",
            "",
            "| Topic | Attempts | Correct | Accuracy |",
            "|-------|----------|---------|----------|",
        ]
        for topic, stat in sorted(summary.topics.items()):
            lines.append(f"| {topic} | {stat.total} | {stat.correct} | {stat.accuracy:.1f}% |")
        lines.append("")

        distribution = session.wrong_distribution()
        if distribution.total:
            lines += [
                "## Wrong Questions",
                "",
                "### By topic",
                "",
                "| Topic | Wrong questions |",
                "|-------|-----------------|",
            ]
            lines += [f"| {t} | {n} |" for t, n in distribution.by_topic.items()]
            lines += [
                "",
                "### By difficulty",
                "",
                "| Difficulty | Wrong questions |",
                "|------------|-----------------|",
            ]
            lines += [f"| {d} | {n} |" for d, n in distribution.by_difficulty.items()]
            lines += [
                "",
                "### Still wrong",
                "",
                "| ID | Topic | Attempts | Avg time |",
                "|----|-------|----------|----------|",
            ]
            question_stats = session.question_stats()
            for qid in sorted(wrong):
                question = session.catalog.get(qid)
                stat = question_stats.get(qid)
                if question is None or stat is None:
                    continue
                lines.append(
                    f"| {qid} | {question.topic} | {stat.total_attempts} "
                    f"| {stat.average_seconds:.1f}s |"
                )
            lines.append("")

        lines += ["## Review Advice", ""]
        weak = [
            (topic, stat.accuracy)
            for topic, stat in sorted(summary.topics.items())
            if stat.total > 0 and stat.accuracy < threshold
        ]
        if weak:
            lines += [f"Topics below {threshold:.0f}% accuracy:", ""]
            lines += [f"- **{topic}**: {acc:.1f}%" for topic, acc in weak]
        else:
            lines.append(f"Every practiced topic is at or above {threshold:.0f}% accuracy.")
        lines.append("")

        if wrong:
            lines += [
                f"{len(wrong)} question(s) are still wrong. Work through them with "
                "`quizcoach wrong`, and use `quizcoach review` to revisit their prerequisites.",
                "",
            ]

    lines += ["---", "", "*Generated by quiz-coach*", ""]
    return "\n".join(lines)


def export_report(
    session: QuizSession,
    reports_dir: Path | None = None,
    now: datetime | None = None,
) -> Path:
    """
    Write the learning report to disk.

    Args:
        session: Session to report on
        reports_dir: Output directory (defaults to settings.reports_dir)
        now: Generation time (defaults to the local current time)

    Returns:
        Path of the written file

    Raises:
        OSError: If the directory or file cannot be written
    """
    now = now or datetime.now()
    out_dir = Path(reports_dir or session.settings.reports_path())
    user = session.user_id or DEFAULT_USER_LABEL
    path = out_dir / f"report_{user}_{now:%Y%m%d_%H%M}.md"

    out_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(session, now), encoding="utf-8")

    logger.info(f"Learning report written to {path}")
    return path
