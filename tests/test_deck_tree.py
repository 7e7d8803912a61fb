
from deckquiz.deck_tree import build_deck_tree
from deckquiz.models import DeckCounts, DeckNode, Freshness


def _assert_names_consistent(nodes: list[DeckNode], prefix: str = "") -> None:
    for node in nodes:
        expected = node.name if not prefix else f"{prefix}::{node.name}"
        assert node.full_name == expected
        assert "::" not in node.name
        _assert_names_consistent(node.children, node.full_name)


def test_parent_and_children_in_input_order() -> None:
    forest = build_deck_tree({"A": 1, "A::B": 2, "A::C": 3})

    assert [root.name for root in forest.roots] == ["A"]
    root = forest.roots[0]
    assert root.id == 1
    assert [(child.name, child.id) for child in root.children] == [("B", 2), ("C", 3)]
    assert all(child.children == [] for child in root.children)
    assert root.counts == DeckCounts(0, 0, 0)
    assert root.freshness is Freshness.UNFETCHED
    assert root.expanded is False
    assert root.stats_loading is False


def test_missing_parent_gets_synthetic_id() -> None:
    forest = build_deck_tree({"A::B": 2})

    assert len(forest.roots) == 1
    root = forest.roots[0]
    assert root.name == "A"
    assert root.is_synthetic
    assert root.id < 0
    assert [(child.full_name, child.id) for child in root.children] == [("A::B", 2)]
    assert len(forest) == 2


def test_synthetic_ids_are_distinct() -> None:
    forest = build_deck_tree({"X::Y::Z": 7, "P::Q": 8})

    synthetic = [node.id for node in forest.walk() if node.is_synthetic]
    assert len(synthetic) == 3
    assert len(set(synthetic)) == 3
    assert forest["X::Y::Z"].id == 7
    assert forest["P::Q"].id == 8


def test_parent_listed_after_child_adopts_real_id_without_duplicate() -> None:
    forest = build_deck_tree({"A::B": 2, "A": 1, "A::C": 3})

    assert [root.full_name for root in forest.roots] == ["A"]
    assert forest["A"].id == 1
    assert not forest["A"].is_synthetic
    assert [child.name for child in forest["A"].children] == ["B", "C"]
    assert len(forest) == 3


def test_roots_follow_first_appearance() -> None:
    forest = build_deck_tree({"Zoology::Birds": 5, "Art": 1, "Zoology": 4, "Art::Baroque": 2, "Default": 3})

    assert [root.name for root in forest.roots] == ["Zoology", "Art", "Default"]
    assert [child.name for child in forest["Art"].children] == ["Baroque"]


def test_deep_unsorted_input_keeps_full_names_consistent() -> None:
    decks = {
        "Lang::French::Verbs::Irregular": 10,
        "Lang::Spanish": 11,
        "Lang": 12,
        "Lang::French": 13,
        "Math::Algebra": 14,
        "Lang::French::Nouns": 15,
    }
    forest = build_deck_tree(decks)

    _assert_names_consistent(forest.roots)
    names = [node.full_name for node in forest.walk()]
    assert len(names) == len(set(names))
    assert names == [
        "Lang",
        "Lang::French",
        "Lang::French::Verbs",
        "Lang::French::Verbs::Irregular",
        "Lang::French::Nouns",
        "Lang::Spanish",
        "Math",
        "Math::Algebra",
    ]
    assert forest["Lang::French"].id == 13
    assert forest["Lang::French::Verbs"].is_synthetic


def test_empty_mapping_gives_empty_forest() -> None:
    forest = build_deck_tree({})
    assert forest.roots == []
    assert len(forest) == 0
    assert list(forest.walk()) == []


def test_empty_segments_become_nodes() -> None:
    forest = build_deck_tree({"A::::B": 3, "::C": 4, "D::": 5})

    assert [root.full_name for root in forest.roots] == ["A", "", "D"]
    assert [node.full_name for node in forest["A"].children] == ["A::"]
    assert forest["A::"].name == ""
    assert forest["A::"].is_synthetic
    assert forest["A::::B"].id == 3
    assert forest["::C"].id == 4
    assert forest[""].is_synthetic
    assert forest["D::"].name == ""
    assert forest["D::"].id == 5


def test_custom_separator() -> None:
    forest = build_deck_tree({"a/b": 2, "a": 1}, separator="/")
    assert forest["a"].children[0].full_name == "a/b"
