"""Interactive CLI application."""
import logging
import random
import unicodedata
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from vocab_srs.analytics import retention_metrics
from vocab_srs.catalog import get_categories
from vocab_srs.config import DEFAULT_DB_PATH, DEFAULT_USER_ID
from vocab_srs.db import init_db
from vocab_srs.errors import SchedulingError
from vocab_srs.gamification import (
    ACHIEVEMENTS, active_streak, add_xp, check_achievements, completed_categories, correct_run,
    new_achievements, replay_history, xp_progress,
)
from vocab_srs.importer import import_file
from vocab_srs.intervals import INTERVAL_DAYS, MAX_LEVEL
from vocab_srs.logger import setup_logging
from vocab_srs.mastery import get_mastery_description, get_mastery_label
from vocab_srs.models import (
    Direction, GamificationState, Item, ReviewEvent, ReviewMode, SessionConfig, SessionPlan,
)
from vocab_srs.progress import (
    load_achievements, load_catalog, load_progress, load_review_history, record_answer, reset_progress,
    unlock_achievements,
)
from vocab_srs.scheduler import build_session
from vocab_srs.seed import is_seeded, seed_words
from vocab_srs.settings import get_saved_session_config, get_setting, save_session_config
from vocab_srs.stats import (
    category_performance, due_count_by_category, learning_stats, mastery_distribution,
)

logger = logging.getLogger(__name__)

console = Console()

EXIT_WORDS = {"q", "menu"}


class SessionExitRequested(Exception):
    """Raised when the user leaves a study session early."""


def session_prompt(text: str, **kwargs) -> str:
    value = Prompt.ask(text, **kwargs)
    if value.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return value


def _normalize(text: str, ignore_accents: bool) -> str:
    text = text.strip().lower()
    if ignore_accents:
        text = "".join(c for c in unicodedata.normalize("NFD", text) if not unicodedata.combining(c))
    return text


def check_answer(expected: str, given: str, ignore_accents: bool = True) -> bool:
    return _normalize(expected, ignore_accents) == _normalize(given, ignore_accents)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def show_welcome():
    console.print(Panel(
        "[bold]Vocabulary Trainer[/bold]\n[dim]Leitner spaced repetition[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("study", "Start a review session"),
        ("dashboard", "Mastery levels + statistics"),
        ("categories", "Words and due counts per category"),
        ("import", "Add words from a file"),
        ("reset", "Erase all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def render_empty_session(plan: SessionPlan) -> None:
    if plan.review_mode is ReviewMode.CATEGORY:
        console.print(f"[yellow]No words to review in '{plan.category_filter}' right now.[/yellow]")
    else:
        console.print("[green]All caught up! No words are due for review.[/green]")


def run_study_session(db_path: str, user_id: str, items: list[Item], direction: Direction) -> tuple[int, int]:
    """Ask each item once; answers are saved as they are given."""
    ignore_accents = get_setting(db_path, "ignore_accents", "1") == "1"
    correct = 0
    answered = 0
    console.print(f"\n[bold]Study Session[/bold] - {len(items)} words [dim](type 'q' to stop)[/dim]\n")
    try:
        for i, item in enumerate(items, 1):
            if direction is Direction.SOURCE_TO_TARGET:
                prompt, expected = item.source_text, item.target_text
            else:
                prompt, expected = item.target_text, item.source_text
            console.print(Panel(prompt, title=f"Word {i}/{len(items)} - {item.category}", border_style="cyan"))
            answer = session_prompt("Translation")
            is_correct = check_answer(expected, answer, ignore_accents)
            record = record_answer(db_path, user_id, item.id, is_correct, now_utc())
            answered += 1
            if is_correct:
                correct += 1
                console.print(f"[green]Correct![/green] [dim]{get_mastery_label(record.mastery_level)}[/dim]")
            else:
                console.print(f"[red]Incorrect.[/red] Answer: [green]{expected}[/green]")
            console.print()
    except SessionExitRequested:
        console.print("[dim]Session ended early.[/dim]")
    if answered:
        console.print(f"[bold]Score: {correct}/{answered} ({correct/answered*100:.0f}%)[/bold]\n")
    return correct, answered


def gamification_state(db_path: str, user_id: str, history: list[ReviewEvent]) -> GamificationState:
    """XP and streaks replayed from history, plus rewards for unlocked achievements."""
    unlocked = load_achievements(db_path, user_id)
    bonus = sum(ACHIEVEMENTS[key].xp_reward for key in unlocked if key in ACHIEVEMENTS)
    return add_xp(replay_history(history), bonus)


def announce_achievements(db_path: str, user_id: str, session_reviews: int) -> list[str]:
    now = now_utc()
    history = load_review_history(db_path, user_id)
    catalog = load_catalog(db_path)
    progress = load_progress(db_path, user_id)
    state = gamification_state(db_path, user_id, history)
    eligible = check_achievements(
        now,
        total_reviews=len(history),
        mastered_words=sum(1 for r in progress.values() if r.mastery_level == MAX_LEVEL),
        current_streak=active_streak(state, now.date()),
        session_reviews=session_reviews,
        consecutive_correct=correct_run(history),
        level=state.level,
        categories_completed=completed_categories(catalog, progress),
    )
    unlocked = unlock_achievements(
        db_path, user_id, new_achievements(eligible, load_achievements(db_path, user_id)), now,
    )
    for key in unlocked:
        achievement = ACHIEVEMENTS[key]
        console.print(f"[bold yellow]Achievement unlocked: {achievement.name}[/bold yellow] "
                      f"[dim]{achievement.description} (+{achievement.xp_reward} XP)[/dim]")
    return unlocked


def cmd_study(db_path: str, user_id: str):
    catalog = load_catalog(db_path)
    saved = get_saved_session_config(db_path)
    mode = Prompt.ask(
        "Review mode", choices=[m.value for m in ReviewMode], default=saved.review_mode.value,
    )
    category = None
    if mode == ReviewMode.CATEGORY.value:
        categories = [c for c in get_categories(catalog) if c]
        for name in categories:
            console.print(f"  [cyan]{name}[/cyan]")
        category = Prompt.ask("Category", default=saved.category_filter or (categories[0] if categories else None))
    direction = Prompt.ask(
        "Direction", choices=[d.value for d in Direction], default=saved.direction.value,
    )
    config = SessionConfig(review_mode=mode, category_filter=category, direction=direction)
    plan = build_session(catalog, load_progress(db_path, user_id), config, now_utc())
    save_session_config(db_path, config)

    if plan.is_empty:
        render_empty_session(plan)
        return
    console.print(Panel(
        f"{len(plan.items)} words, about {plan.estimated_minutes} min"
        f"\n[dim]{plan.due_count} words due across the whole catalog[/dim]",
        title=f"{plan.review_mode.value.title()} Review",
    ))
    by_id = {item.id: item for item in catalog}
    items = [by_id[item_id] for item_id in plan.items]
    random.shuffle(items)
    _, answered = run_study_session(db_path, user_id, items, plan.direction)
    if answered:
        announce_achievements(db_path, user_id, answered)


def cmd_dashboard(db_path: str, user_id: str):
    catalog = load_catalog(db_path)
    progress = load_progress(db_path, user_id)
    now = now_utc()
    stats = learning_stats(catalog, progress)

    console.print(Panel(
        f"[bold]{stats.items_studied}[/bold] of {stats.total_items} words studied  |  "
        f"Mastered: [bold]{stats.mastered_items}[/bold]  |  "
        f"In progress: [bold]{stats.items_in_progress}[/bold]",
        title="Learning Dashboard", border_style="blue",
    ))

    table = Table(title="Mastery Levels")
    table.add_column("Level", justify="right")
    table.add_column("Label", style="cyan")
    table.add_column("Review", style="dim")
    table.add_column("Words", justify="right")
    for level, count in mastery_distribution(catalog, progress).items():
        table.add_row(
            str(level), get_mastery_label(level),
            f"{get_mastery_description(level)} ({INTERVAL_DAYS[level]}d)", str(count),
        )
    console.print(table)

    due_table = Table(title="Due for Review")
    due_table.add_column("Category", style="cyan")
    due_table.add_column("Due", justify="right")
    due_by_category = due_count_by_category(catalog, progress, now)
    for category, count in sorted(due_by_category.items()):
        due_table.add_row(category or "[dim](none)[/dim]", str(count))
    due_table.add_row("[bold]Total[/bold]", f"[bold]{sum(due_by_category.values())}[/bold]")
    console.print(due_table)

    average = f"{stats.average_accuracy * 100:.0f}%" if stats.average_accuracy is not None else "-"
    console.print(f"\n  Attempts: [bold]{stats.total_attempts}[/bold]  |  "
                  f"Accuracy: [bold]{stats.accuracy_percent}%[/bold]  |  "
                  f"Avg per word: [bold]{average}[/bold]  |  "
                  f"Streak: [bold]{stats.current_streak}[/bold]")

    history = load_review_history(db_path, user_id)
    state = gamification_state(db_path, user_id, history)
    console.print(f"  Level: [bold]{state.level}[/bold] ({state.total_xp} XP, "
                  f"{xp_progress(state.total_xp):.0%} to next)  |  "
                  f"Day streak: [bold]{active_streak(state, now.date())}[/bold] (best {state.longest_streak})")

    retention = retention_metrics(history, now)
    if retention.retention_by_level:
        console.print(f"  30-day retention: [bold]{retention.overall_retention_rate:.0f}%[/bold] "
                      f"({retention.recent_trend})")

    performance = category_performance(catalog, progress)
    studied = [p for p in performance if p.average_level > 0]
    if studied:
        weakest = studied[-1]
        console.print(f"\n  [yellow]Weakest category: {weakest.category} "
                      f"(avg level {weakest.average_level:.1f})[/yellow]")


def cmd_categories(db_path: str, user_id: str):
    catalog = load_catalog(db_path)
    due = due_count_by_category(catalog, load_progress(db_path, user_id), now_utc())
    table = Table(title="Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Words", justify="right")
    table.add_column("Due", justify="right")
    for category in get_categories(catalog):
        total = sum(1 for item in catalog if item.category == category)
        table.add_row(category or "[dim](none)[/dim]", str(total), str(due.get(category, 0)))
    console.print(table)


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    category = Prompt.ask("Category for rows without one", default="General")
    result = import_file(db_path, file_path, category=category)
    console.print(f"[green]Imported {result['added']} words from {result['filename']}[/green]"
                  + (f" [dim]({result['duplicates']} already present)[/dim]" if result["duplicates"] else ""))


def cmd_reset(db_path: str, user_id: str):
    if Confirm.ask("Erase all progress and review history?", default=False):
        reset_progress(db_path, user_id)
        console.print("[green]Progress reset.[/green]")


def main():
    setup_logging()
    db_path = DEFAULT_DB_PATH
    user_id = DEFAULT_USER_ID
    init_db(db_path)
    if not is_seeded(db_path):
        console.print("[dim]Setting up for first use...[/dim]")
        added = seed_words(db_path)
        console.print(f"[green]Ready! {added} starter words loaded.[/green]\n")

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="study").strip().lower()
        try:
            if choice == "study":
                cmd_study(db_path, user_id)
            elif choice == "dashboard":
                cmd_dashboard(db_path, user_id)
            elif choice == "categories":
                cmd_categories(db_path, user_id)
            elif choice == "import":
                cmd_import(db_path)
            elif choice == "reset":
                cmd_reset(db_path, user_id)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Ciao![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except SchedulingError as e:
            console.print(f"[red]{e}[/red]")
        except Exception as e:
            logger.exception("Command %r failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
