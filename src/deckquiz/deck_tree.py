"""Build the deck hierarchy from flat, separator-delimited deck names."""

from __future__ import annotations

from collections.abc import Mapping

from .models import DECK_SEPARATOR, DeckForest, DeckNode


def build_deck_tree(decks: Mapping[str, int], separator: str = DECK_SEPARATOR) -> DeckForest:
    """Turn a `{full name: id}` mapping into an ordered forest.

    Roots and children keep the order in which their path first appears in
    `decks`. A path prefix without its own entry gets a negative synthetic id
    until (and unless) its entry is processed, at which point the existing
    node adopts the real id. Empty segments, as in `"A::::B"`, are ordinary
    nodes named `""`.
    """
    roots: list[DeckNode] = []
    nodes: dict[str, DeckNode] = {}
    next_synthetic = -1

    for full_name, deck_id in decks.items():
        parts = full_name.split(separator)
        parent: DeckNode | None = None
        path = ""
        for index, part in enumerate(parts):
            path = part if index == 0 else f"{path}{separator}{part}"
            is_target = index == len(parts) - 1
            node = nodes.get(path)
            if node is None:
                if is_target:
                    node_id = int(deck_id)
                else:
                    node_id = next_synthetic
                    next_synthetic -= 1
                node = DeckNode(name=part, full_name=path, id=node_id)
                nodes[path] = node
                if parent is None:
                    roots.append(node)
                else:
                    parent.children.append(node)
            elif is_target:
                node.id = int(deck_id)
            parent = node

    return DeckForest(roots)

