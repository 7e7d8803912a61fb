"""Deck browsing: load the hierarchy and fetch counts as nodes expand."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol

from loguru import logger

from .deck_tree import build_deck_tree
from .errors import DeckQuizError
from .models import DeckForest, DeckNode, Freshness
from .stats import StatsAggregator


class DeckSource(Protocol):
    """Card-service calls the browser relies on."""

    async def deck_names_and_ids(self) -> Mapping[str, int]: ...

    async def deck_stats(self, deck_names: list[str]) -> Mapping[str, Mapping[str, Any]]: ...


class DeckBrowser:
    """Owns the deck forest for one session and every mutation of it."""

    def __init__(self, source: DeckSource, aggregator: StatsAggregator | None = None) -> None:
        self.source = source
        self.aggregator = aggregator or StatsAggregator(source)
        self.forest = DeckForest()
        self.loading = False
        self.error: str | None = None

    async def load(self) -> DeckForest:
        """Fetch deck names, build the forest, and fetch top-level counts."""
        self.error = None
        self.loading = True
        try:
            try:
                decks = await self.source.deck_names_and_ids()
            except DeckQuizError as exc:
                self._fail("Could not load decks", exc)
                self.forest = DeckForest()
                return self.forest

            self.forest = build_deck_tree(decks)
            logger.info("Loaded {} decks ({} top-level)", len(self.forest), len(self.forest.roots))
            try:
                await self.aggregator.refresh(self.forest, [root.full_name for root in self.forest.roots])
            except DeckQuizError as exc:
                self._fail("Could not load deck stats", exc)
            return self.forest
        finally:
            self.loading = False

    async def toggle(self, full_name: str) -> DeckNode:
        """Expand or collapse one deck.

        Expanding a deck whose children include any never-fetched node
        fetches counts for the immediate children. Raises KeyError for an
        unknown deck.
        """
        node = self.forest[full_name]
        self.error = None
        node.expanded = not node.expanded
        if not node.expanded or not node.children:
            return node
        if not any(_needs_stats(child) for child in node.children):
            return node

        node.stats_loading = True
        try:
            await self.aggregator.refresh(self.forest, [child.full_name for child in node.children])
        except DeckQuizError as exc:
            self._fail(f"Could not load stats under {full_name!r}", exc)
        finally:
            node.stats_loading = False
        return node

    def visible_rows(self) -> Iterator[tuple[int, DeckNode]]:
        """Yield `(depth, node)` for every row an expanded view shows."""
        stack = [(0, node) for node in reversed(self.forest.roots)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            if node.expanded:
                stack.extend((depth + 1, child) for child in reversed(node.children))

    def _fail(self, message: str, exc: DeckQuizError) -> None:
        logger.warning("{}: {}", message, exc)
        self.error = f"{message}: {exc}"


def _needs_stats(node: DeckNode) -> bool:
    """Whether a node still has counts to fetch; synthetic decks never do."""
    return node.freshness is Freshness.UNFETCHED and not node.is_synthetic
