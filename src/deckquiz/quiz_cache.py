"""Per-card quiz memoization on top of a key-value store."""

from __future__ import annotations

from loguru import logger
from pydantic import ValidationError

from .models import Card
from .quiz_generator import QuizGenerator, parse_quiz
from .schemas import Quiz
from .storage import KeyValueStore

CACHE_KEY_PREFIX = "mcq_"


def cache_key(card_id: int) -> str:
    return f"{CACHE_KEY_PREFIX}{card_id}"


class QuizCache:
    """Returns the stored quiz for a card, generating it on first view."""

    def __init__(self, store: KeyValueStore, generator: QuizGenerator) -> None:
        self.store = store
        self.generator = generator

    def peek(self, card_id: int) -> Quiz | None:
        """Return the cached quiz for a card without generating one."""
        raw = self.store.get(cache_key(card_id))
        if raw is None:
            return None
        try:
            return Quiz.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring unreadable cached quiz for card {}: {}", card_id, exc)
            return None

    async def get_quiz(self, card: Card) -> Quiz:
        """Return the quiz for `card`.

        Generation failures propagate and nothing is stored for the card.
        """
        cached = self.peek(card.id)
        if cached is not None:
            logger.debug("Quiz cache hit for card {}", card.id)
            return cached

        logger.debug("Quiz cache miss for card {}", card.id)
        quiz = await self.generator.generate(card.question, card.answer)
        if not isinstance(quiz, Quiz):
            quiz = parse_quiz(quiz)
        self.store.set(cache_key(card.id), quiz.to_json())
        return quiz
