"""CLI entrypoint for browsing decks and reviewing cards as quizzes."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from .anki_client import AnkiConnectClient
from .browser import DeckBrowser
from .config import Settings, get_settings
from .models import DeckNode
from .quiz_cache import QuizCache
from .quiz_generator import HttpQuizGenerator, OpenAIQuizGenerator, QuizGenerator
from .review import ReviewSession
from .storage import SqliteKeyValueStore

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
MENU_QUIT_COMMANDS = {"q"}
MENU_RELOAD_COMMANDS = {"g"}
NEXT_COMMANDS = {"n", ""}


@dataclass
class Services:
    """Collaborators shared by the browse and review flows."""

    anki: AnkiConnectClient
    quizzes: QuizCache
    store: SqliteKeyValueStore

    def close(self) -> None:
        self.anki.close()
        self.store.close()


def configure_logging(level: str) -> None:
    """Send log records to stderr at `level`."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def _generator(settings: Settings) -> QuizGenerator:
    if settings.quiz_service_url:
        return HttpQuizGenerator(settings.quiz_service_url, timeout=settings.timeout_seconds)
    return OpenAIQuizGenerator(model=settings.openai_model)


def _services(settings: Settings) -> Services:
    """Create collaborators from settings."""
    store = SqliteKeyValueStore(settings.cache_path)
    return Services(
        anki=AnkiConnectClient(settings.anki_connect_url, timeout=settings.timeout_seconds),
        quizzes=QuizCache(store, _generator(settings)),
        store=store,
    )


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="deckquiz", description="Review Anki decks as multiple-choice quizzes")
    parser.add_argument("command", nargs="?", default="browse", choices=["browse", "review"])
    parser.add_argument("deck", nargs="?", help="full deck name for review, e.g. 'Languages::French'")
    args = parser.parse_args(argv)
    if args.command == "review" and not args.deck:
        parser.error("review requires a deck name")

    settings = get_settings()
    configure_logging(settings.log_level)
    services = _services(settings)
    try:
        if args.command == "review":
            return asyncio.run(review_shell(services, args.deck))
        return asyncio.run(browse_shell(services))
    finally:
        services.close()


async def browse_shell(services: Services, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Show the deck table and react to expand, review, and reload commands."""
    browser = DeckBrowser(services.anki)
    await browser.load()
    while True:
        rows = list(browser.visible_rows())
        print_fn("\n=== Decks ===")
        if rows:
            _print_deck_table(rows, print_fn)
        else:
            print_fn("No decks found.")
        if browser.error:
            print_fn(f"Error: {browser.error}")
        print_fn("<n>) Expand/collapse deck")
        print_fn("r <n>) Review deck")
        print_fn("g) Reload")
        print_fn("q) Quit")

        choice = input_fn("Choose: ").strip().lower()
        if choice in MENU_QUIT_COMMANDS:
            return 0
        if choice in MENU_RELOAD_COMMANDS:
            await browser.load()
            continue

        review = choice.startswith("r ")
        if review:
            choice = choice[2:].strip()
        if not choice.isdigit() or not 1 <= int(choice) <= len(rows):
            print_fn("Invalid choice.")
            continue

        node = rows[int(choice) - 1][1]
        if review:
            await review_shell(services, node.full_name, input_fn, print_fn)
        elif not node.has_children:
            print_fn(f"'{node.name}' has no subdecks.")
        else:
            await browser.toggle(node.full_name)


def _print_deck_table(rows: list[tuple[int, DeckNode]], print_fn: PrintFn) -> None:
    labels = []
    for depth, node in rows:
        marker = ("-" if node.expanded else "+") if node.has_children else " "
        labels.append(f"{'  ' * depth}{marker} {node.name}")
    number_width = len(str(len(rows)))
    name_width = max(len("Deck"), max(len(label) for label in labels))
    print_fn(f"{'':>{number_width}}  {'Deck':<{name_width}} {'New':>5} {'Learn':>5} {'Due':>5}")
    for index, ((_, node), label) in enumerate(zip(rows, labels, strict=True), start=1):
        if node.stats_loading:
            counts = f"{'...':>5} {'...':>5} {'...':>5}"
        else:
            counts = f"{node.counts.new:>5} {node.counts.learning:>5} {node.counts.due:>5}"
        print_fn(f"{index:>{number_width}}) {label:<{name_width}} {counts}")


async def review_shell(
    services: Services,
    deck_name: str,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
) -> int:
    """Quiz the user on each due card of one deck."""
    session = ReviewSession(services.anki, services.quizzes)
    await session.load(deck_name)
    print_fn(f"\n=== {deck_name} ===")
    if session.is_empty:
        if session.error:
            print_fn(f"Error: {session.error}")
            return 1
        print_fn("No due cards found in this deck.")
        return 0

    while True:
        if not _review_card(session, input_fn, print_fn):
            break
        if session.is_last:
            print_fn("\nEnd of deck.")
            break
        choice = input_fn("n) Next card  q) Quit: ").strip().lower()
        if choice in MENU_QUIT_COMMANDS:
            break
        if choice not in NEXT_COMMANDS:
            print_fn("Invalid choice. Moving on.")
        await session.next()

    print_fn(f"Score: {session.correct}/{session.answered} correct")
    return 0


def _review_card(session: ReviewSession, input_fn: InputFn, print_fn: PrintFn) -> bool:
    """Show the current card and take one answer; False when the user quits."""
    print_fn(f"\nCard {session.position} of {session.total}")
    quiz = session.quiz
    if quiz is None:
        if session.error:
            print_fn(f"Error: {session.error}")
        print_fn("No quiz available for this card.")
        return True

    print_fn(quiz.title)
    print_fn(f"\n{quiz.question}")
    for index, option in enumerate(quiz.options, start=1):
        print_fn(f"{index}) {option.text}")

    while True:
        choice = input_fn("Answer (number, q to quit): ").strip().lower()
        if choice in MENU_QUIT_COMMANDS:
            return False
        if choice.isdigit() and 1 <= int(choice) <= len(quiz.options):
            break
        print_fn("Invalid choice.")

    session.select_answer(int(choice) - 1)
    print_fn("Correct." if session.is_correct else "Incorrect.")
    for index, option in enumerate(quiz.options):
        mark = "correct" if index == quiz.correct_answer_index else "wrong"
        chosen = " (your answer)" if index == session.selected_index else ""
        print_fn(f"[{mark}] {option.text}{chosen}: {option.explanation}")
    return True


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
