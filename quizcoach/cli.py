"""
quiz-coach: terminal front end for the study core.

Commands:
- quizcoach practice   - Answer one random question
- quizcoach wrong      - Retry one question from the wrong book
- quizcoach recommend  - Practice the highest-need questions
- quizcoach exam       - Timed-free mock exam over N distinct questions
- quizcoach stats      - Overall and per-topic statistics
- quizcoach review     - Prerequisite-first review path for a topic
- quizcoach report     - Export a Markdown learning report
"""
from __future__ import annotations

import sys
import time
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt
from rich.table import Table

from .bank.question_catalog import Question
from .config import get_settings
from .exceptions import CyclicDependencyError, InvalidUserIdError
from .graph.review_planner import MasteryLabel
from .report import export_report
from .session import QuizSession
from .study.stats import TopicStat

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quizcoach",
    help="quiz-coach: adaptive self-study quizzes",
    no_args_is_help=True,
)
console = Console()

USER_OPTION = typer.Option(None, "--user", "-u", help="User scope (defaults to the shared log)")

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}

LABEL_STYLES = {
    MasteryLabel.NEEDS_STUDY: "[yellow]needs study[/yellow]",
    MasteryLabel.WEAK: "[red]weak[/red]",
}


# =============================================================================
# Session Helpers
# =============================================================================


def _open_session(user: Optional[str]) -> QuizSession:
    """Load catalog, graph and the user's history, or exit on a fatal load error."""
    settings = get_settings()
    try:
        session = QuizSession(settings, user_id=user)
    except InvalidUserIdError as e:
        console.print(f"[{STYLES['incorrect']}]{escape(str(e))}[/{STYLES['incorrect']}]")
        raise typer.Exit(1)

    if not session.load_catalog():
        console.print(
            f"[{STYLES['incorrect']}]Could not load a question catalog from "
            f"{settings.catalog_path()}[/{STYLES['incorrect']}]"
        )
        raise typer.Exit(1)

    session.load_knowledge_graph()
    session.load_records()

    for diagnostic in session.diagnostics:
        console.print(f"[dim]skipped {diagnostic}[/dim]")

    return session


def _ask(session: QuizSession, question: Question, heading: str | None = None) -> bool:
    """Show a question, time the answer and record it. Returns correctness."""
    body = "\n".join(
        [question.text, ""] + [f"{i}. {opt}" for i, opt in enumerate(question.options)]
    )
    title = heading or f"Question {question.id}"
    console.print(
        Panel(
            body,
            title=title,
            subtitle=f"{question.topic} | difficulty {question.difficulty}",
        )
    )

    start = time.monotonic()
    choice = IntPrompt.ask("Your answer", choices=[str(i) for i in range(len(question.options))])
    elapsed = int(time.monotonic() - start)

    outcome = session.record_attempt(question.id, choice, elapsed)
    if outcome.correct:
        console.print(f"[{STYLES['correct']}]Correct![/{STYLES['correct']}]")
    else:
        console.print(
            f"[{STYLES['incorrect']}]Wrong.[/{STYLES['incorrect']}] "
            f"The answer is {outcome.correct_option_index}. {question.correct_option}"
        )
    if not outcome.saved:
        console.print(f"[{STYLES['warning']}]Warning: attempt not saved to disk[/{STYLES['warning']}]")
    return outcome.correct


def _topic_table(title: str, topics: dict[str, TopicStat]) -> Table:
    table = Table(title=title)
    table.add_column("Topic")
    table.add_column("Attempts", justify="right")
    table.add_column("Correct", justify="right")
    table.add_column("Accuracy", justify="right")
    for topic, stat in sorted(topics.items()):
        table.add_row(topic, str(stat.total), str(stat.correct), f"{stat.accuracy:.1f}%")
    return table


# =============================================================================
# Commands
# =============================================================================


@app.command()
def practice(user: Optional[str] = USER_OPTION) -> None:
    """Answer one random question."""
    session = _open_session(user)
    question = session.pick_random_question()
    if question is None:
        console.print("The question catalog is empty.")
        raise typer.Exit(0)
    _ask(session, question)


@app.command()
def wrong(user: Optional[str] = USER_OPTION) -> None:
    """Retry a random question from the wrong book."""
    session = _open_session(user)
    question = session.pick_wrong_question()
    if question is None:
        console.print("No wrong questions right now. Practice a few first!")
        raise typer.Exit(0)
    _ask(session, question, heading=f"Wrong book: question {question.id}")


@app.command()
def recommend(
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Questions to recommend"),
    list_only: bool = typer.Option(False, "--list", "-l", help="Show the ranking without practicing"),
    user: Optional[str] = USER_OPTION,
) -> None:
    """Practice the questions that most need review."""
    session = _open_session(user)
    candidates = session.top_k_recommendations(count)

    table = Table(title="Recommended questions")
    table.add_column("#", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Topic")
    table.add_column("Score", justify="right")
    for rank, candidate in enumerate(candidates, start=1):
        question = session.catalog.get(candidate.question_id)
        table.add_row(str(rank), str(candidate.question_id), question.topic, f"{candidate.score:.3f}")
    console.print(table)

    if list_only:
        return

    for rank, candidate in enumerate(candidates, start=1):
        question = session.catalog.get(candidate.question_id)
        _ask(session, question, heading=f"Recommendation {rank}/{len(candidates)}")


@app.command()
def exam(
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of exam questions"),
    user: Optional[str] = USER_OPTION,
) -> None:
    """Mock exam over distinct random questions."""
    session = _open_session(user)
    if count is None:
        count = IntPrompt.ask(f"How many questions? (1-{len(session.catalog)})")

    questions = session.draw_exam(count)
    checkpoint = session.exam_checkpoint()
    console.print(f"[{STYLES['info']}]Exam: {len(questions)} questions[/{STYLES['info']}]")

    for i, question in enumerate(questions, start=1):
        _ask(session, question, heading=f"Exam {i}/{len(questions)}")

    summary = session.summarize_since(checkpoint)
    console.print(
        f"\nScore: {summary.correct}/{summary.total} correct, "
        f"{summary.wrong} wrong ({summary.accuracy:.1f}%)"
    )
    console.print(_topic_table("Exam by topic", summary.topics))


@app.command()
def stats(user: Optional[str] = USER_OPTION) -> None:
    """Show overall and per-topic statistics."""
    session = _open_session(user)
    summary = session.overall_summary()

    if summary.total == 0:
        console.print("No attempts recorded yet.")
        raise typer.Exit(0)

    console.print(f"Attempts: {summary.total}")
    console.print(f"Correct:  {summary.correct}")
    console.print(f"Accuracy: {summary.accuracy:.1f}%")
    console.print(_topic_table("By topic", summary.topics))
    console.print(f"Currently wrong questions: {len(session.current_wrong_set())}")


@app.command()
def review(
    topic: Optional[str] = typer.Option(None, "--topic", "-t", help="Target topic"),
    user: Optional[str] = USER_OPTION,
) -> None:
    """Prerequisite-first review path for a topic."""
    session = _open_session(user)
    if not session.review_path_available:
        console.print(
            f"[{STYLES['warning']}]Knowledge graph not loaded; review paths are unavailable."
            f"[/{STYLES['warning']}]"
        )
        raise typer.Exit(1)

    if topic is None:
        standings = session.ranked_topics()
        table = Table(title="Topics (weakest first)")
        table.add_column("#", justify="right")
        table.add_column("Topic")
        table.add_column("Attempts", justify="right")
        table.add_column("Accuracy", justify="right")
        for i, standing in enumerate(standings, start=1):
            accuracy = f"{standing.accuracy:.1f}%" if standing.practiced else "unpracticed"
            table.add_row(str(i), standing.topic, str(standing.total), accuracy)
        console.print(table)
        choice = IntPrompt.ask(
            "Topic to review", choices=[str(i) for i in range(1, len(standings) + 1)]
        )
        topic = standings[choice - 1].topic

    try:
        steps = session.review_path(topic)
    except CyclicDependencyError as e:
        console.print(f"[{STYLES['incorrect']}]{escape(str(e))}[/{STYLES['incorrect']}]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Review path to {topic}[/bold]\n")
    for i, step in enumerate(steps, start=1):
        detail = ""
        if step.stat is not None and step.stat.total:
            detail = f" [dim]({step.stat.total} attempts, {step.stat.accuracy:.1f}%)[/dim]"
        label = f" {LABEL_STYLES[step.label]}" if step.label else ""
        console.print(f"{i}. {step.topic}{detail}{label}")

    unlocks = session.next_topics(topic)
    if unlocks:
        console.print(f"\n[dim]Builds towards: {', '.join(unlocks)}[/dim]")


@app.command()
def report(user: Optional[str] = USER_OPTION) -> None:
    """Export a Markdown learning report."""
    session = _open_session(user)
    try:
        path = export_report(session)
    except OSError as e:
        logger.error(f"Report export failed: {e}")
        console.print(f"[{STYLES['incorrect']}]Could not write report: {escape(str(e))}[/{STYLES['incorrect']}]")
        raise typer.Exit(1)
    console.print(f"[green]Report written to {path}[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level.upper(),
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
