"""Step through a deck's due cards as multiple-choice quizzes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from loguru import logger

from .anki_client import due_cards_query
from .cloze import extract_cloze
from .errors import DeckQuizError
from .models import Card
from .quiz_cache import QuizCache
from .schemas import Quiz


class CardSource(Protocol):
    """Card-service calls a review session relies on."""

    async def find_cards(self, query: str) -> list[int]: ...

    async def cards_info(self, card_ids: list[int]) -> list[Mapping[str, Any]]: ...


def card_from_info(info: Mapping[str, Any]) -> Card:
    """Build a plain-text card from one `cardsInfo` entry."""
    content = extract_cloze(str(info.get("question") or ""))
    return Card(id=int(info["cardId"]), question=content.question, answer=content.answer)


class ReviewSession:
    """Cursor over due card ids plus the shown quiz and answer state."""

    def __init__(self, cards: CardSource, quizzes: QuizCache) -> None:
        self.cards = cards
        self.quizzes = quizzes
        self.deck_name: str | None = None
        self.card_ids: list[int] = []
        self.cursor = 0
        self.card: Card | None = None
        self.quiz: Quiz | None = None
        self.selected_index: int | None = None
        self.revealed = False
        self.loading = False
        self.error: str | None = None
        self.answered = 0
        self.correct = 0

    @property
    def total(self) -> int:
        return len(self.card_ids)

    @property
    def is_empty(self) -> bool:
        return not self.card_ids

    @property
    def is_last(self) -> bool:
        return self.cursor >= len(self.card_ids) - 1

    @property
    def position(self) -> int:
        """1-based index of the current card, 0 when there are none."""
        return self.cursor + 1 if self.card_ids else 0

    @property
    def is_correct(self) -> bool | None:
        """Whether the revealed answer was right, None before an answer."""
        if self.quiz is None or self.selected_index is None:
            return None
        return self.selected_index == self.quiz.correct_answer_index

    async def load(self, deck_name: str) -> None:
        """Fetch the deck's due, new, and review card ids and show the first."""
        self.deck_name = deck_name
        self.card_ids = []
        self.cursor = 0
        self.answered = 0
        self.correct = 0
        self._clear_card()
        self.error = None
        self.loading = True
        try:
            self.card_ids = await self.cards.find_cards(due_cards_query(deck_name))
        except DeckQuizError as exc:
            self._fail(f"Could not fetch cards for {deck_name!r}", exc)
            self.loading = False
            return
        logger.info("Loaded {} cards for deck {!r}", len(self.card_ids), deck_name)
        await self._show_current()

    async def next(self) -> bool:
        """Move to the next card; a no-op on the last one."""
        if self.is_last:
            return False
        self.cursor += 1
        await self._show_current()
        return True

    def select_answer(self, index: int) -> None:
        """Record the chosen option and reveal the explanations."""
        if self.quiz is None:
            raise RuntimeError("No quiz is shown.")
        if not 0 <= index < len(self.quiz.options):
            raise IndexError(f"Option {index} is out of range for {len(self.quiz.options)} options.")
        first_answer = not self.revealed
        self.selected_index = index
        self.revealed = True
        if first_answer:
            self.answered += 1
            if index == self.quiz.correct_answer_index:
                self.correct += 1

    async def _show_current(self) -> None:
        self._clear_card()
        if not self.card_ids:
            self.loading = False
            return
        card_id = self.card_ids[self.cursor]
        self.error = None
        self.loading = True
        try:
            infos = await self.cards.cards_info([card_id])
            if not infos:
                raise LookupError(f"Card {card_id} was not found.")
            self.card = card_from_info(infos[0])
            self.quiz = await self.quizzes.get_quiz(self.card)
        except (DeckQuizError, LookupError) as exc:
            self._fail(f"Could not prepare card {card_id}", exc)
        finally:
            self.loading = False

    def _clear_card(self) -> None:
        self.card = None
        self.quiz = None
        self.selected_index = None
        self.revealed = False

    def _fail(self, message: str, exc: Exception) -> None:
        logger.warning("{}: {}", message, exc)
        self.error = f"{message}: {exc}"
