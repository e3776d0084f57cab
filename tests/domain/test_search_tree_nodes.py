from __future__ import annotations

from domain.models import TreeData
from domain.services.build_tree_graph import build_tree_graph
from domain.services.search_tree_nodes import search_tree_nodes


def _ids(tree_data: TreeData, query: str) -> list[str]:
    graph = build_tree_graph(tree_data.persons, tree_data.relationships)
    return [node.id for node in search_tree_nodes(graph, query)]


def test_search_is_case_insensitive_over_given_names(tree_data: TreeData) -> None:
    assert _ids(tree_data, "OMAR") == ["p3"]


def test_search_matches_family_names(tree_data: TreeData) -> None:
    assert _ids(tree_data, "qahtani") == ["p4"]
    assert _ids(tree_data, "al-harbi") == ["p1", "p3", "p5", "p6", "p7", "p8"]


def test_search_matches_full_names_in_any_script(tree_data: TreeData) -> None:
    assert _ids(tree_data, "khalid al") == ["p1", "p3", "p5"]
    assert _ids(tree_data, "خالد") == ["p1"]


def test_blank_query_matches_nothing(tree_data: TreeData) -> None:
    assert _ids(tree_data, "") == []
    assert _ids(tree_data, "   ") == []
