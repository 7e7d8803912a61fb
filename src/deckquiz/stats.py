"""Fetch deck counts in batches and apply them across the deck forest."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from loguru import logger

from .models import DeckCounts, DeckForest, DeckNode, Freshness


class DeckStatsSource(Protocol):
    """Anything that can return deck stats keyed by deck id."""

    async def deck_stats(self, deck_names: list[str]) -> Mapping[str, Mapping[str, Any]]: ...


def apply_deck_stats(forest: DeckForest, stats: Mapping[Any, Mapping[str, Any]]) -> int:
    """Overwrite counts on every node whose id appears in `stats`.

    The whole forest is walked, not only the nodes that were requested.
    Nodes missing from `stats` are left unchanged. Returns how many nodes
    were updated.
    """
    by_id = {str(deck_id): entry for deck_id, entry in stats.items()}
    updated = 0
    for node in forest.walk():
        entry = by_id.get(str(node.id))
        if entry is None:
            continue
        node.counts = DeckCounts(
            new=int(entry.get("new_count", 0)),
            learning=int(entry.get("learn_count", 0)),
            due=int(entry.get("review_count", 0)),
        )
        node.freshness = Freshness.FRESH
        updated += 1
    return updated


class StatsAggregator:
    """Refreshes counts for a set of deck names with one request."""

    def __init__(self, source: DeckStatsSource) -> None:
        self.source = source

    async def refresh(self, forest: DeckForest, full_names: Sequence[str]) -> int:
        """Fetch and apply counts for `full_names`.

        Unknown names and synthetic nodes are left out of the request; when
        nothing is left no request is made. Requested nodes are marked
        loading until the response is applied; any the response did not name,
        and all of them on failure, return to their previous freshness.
        Collaborator failures propagate.
        """
        targets = _request_targets(forest, full_names)
        if not targets:
            return 0

        # an overlapping request may still own the loading state
        previous = {
            node.full_name: Freshness.UNFETCHED if node.freshness is Freshness.LOADING else node.freshness
            for node in targets
        }
        for node in targets:
            node.freshness = Freshness.LOADING

        try:
            stats = await self.source.deck_stats([node.full_name for node in targets])
            updated = apply_deck_stats(forest, stats)
        finally:
            _restore([node for node in targets if node.freshness is Freshness.LOADING], previous)
        logger.debug("Applied stats for {} decks ({} requested)", updated, len(targets))
        return updated


def _request_targets(forest: DeckForest, full_names: Sequence[str]) -> list[DeckNode]:
    targets: list[DeckNode] = []
    seen: set[str] = set()
    for full_name in full_names:
        node = forest.get(full_name)
        if node is None:
            logger.debug("Skipping stats for unknown deck {!r}", full_name)
            continue
        if node.is_synthetic or full_name in seen:
            continue
        seen.add(full_name)
        targets.append(node)
    return targets


def _restore(nodes: list[DeckNode], previous: Mapping[str, Freshness]) -> None:
    for node in nodes:
        node.freshness = previous[node.full_name]
