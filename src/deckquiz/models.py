"""Core domain models for deck browsing and card review."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

DECK_SEPARATOR = "::"


class Freshness(str, Enum):
    """How current a node's counts are."""

    UNFETCHED = "unfetched"
    LOADING = "loading"
    FRESH = "fresh"


@dataclass(frozen=True)
class DeckCounts:
    """Scheduling tallies for one deck."""

    new: int = 0
    learning: int = 0
    due: int = 0


@dataclass(eq=False)
class DeckNode:
    """One deck in the hierarchy, keyed by its full name."""

    name: str
    full_name: str
    id: int
    children: list[DeckNode] = field(default_factory=list)
    counts: DeckCounts = field(default_factory=DeckCounts)
    freshness: Freshness = Freshness.UNFETCHED
    expanded: bool = False
    stats_loading: bool = False

    @property
    def is_synthetic(self) -> bool:
        """Whether the id is a placeholder for a path with no deck entry."""
        return self.id < 0

    @property
    def has_children(self) -> bool:
        return bool(self.children)


class DeckForest:
    """Ordered deck roots with a full-name index over every node."""

    def __init__(self, roots: list[DeckNode] | None = None) -> None:
        """Index the given roots and all of their descendants."""
        self.roots: list[DeckNode] = list(roots or [])
        self._by_name: dict[str, DeckNode] = {node.full_name: node for node in self.walk()}

    def walk(self) -> Iterator[DeckNode]:
        """Yield every node depth-first, parents before children."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get(self, full_name: str) -> DeckNode | None:
        return self._by_name.get(full_name)

    def __getitem__(self, full_name: str) -> DeckNode:
        return self._by_name[full_name]

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._by_name

    def __iter__(self) -> Iterator[DeckNode]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self._by_name)


@dataclass(frozen=True)
class Card:
    """A card reduced to plain-text question and answer."""

    id: int
    question: str
    answer: str
