from __future__ import annotations

from dataclasses import replace

import pytest

from domain.models import BuildTreeOptions, Point, TreeData, TreeGraph, TreeLayoutConfig
from domain.services.assign_generation_levels import assign_generation_levels
from domain.services.build_tree_graph import build_tree_graph
from domain.services.compute_subtree_extents import compute_subtree_extents
from domain.services.position_tree_nodes import position_tree_nodes
from tests.helpers.tree_fixtures import parent, person, spouse


def _laid_out(
    data: TreeData,
    config: TreeLayoutConfig,
    root_id: str = "p1",
    options: BuildTreeOptions | None = None,
) -> TreeGraph:
    graph = build_tree_graph(data.persons, data.relationships, options)
    root = graph.node(root_id)
    assign_generation_levels(graph, root)
    compute_subtree_extents(graph, root, config)
    position_tree_nodes(graph, root, config)
    return graph


def test_three_generation_coordinates(tree_data: TreeData, layout_config: TreeLayoutConfig) -> None:
    graph = _laid_out(tree_data, layout_config)

    coords = {node.id: (node.x, node.y) for node in graph}
    assert coords == {
        "p1": (0.0, 0.0),
        "p2": (110.0, 0.0),
        "p3": (0.0, 80.0),
        "p4": (110.0, 80.0),
        "p5": (360.0, 80.0),
        "p6": (0.0, 160.0),
        "p7": (120.0, 160.0),
        "p8": (240.0, 160.0),
    }
    assert all(node.is_placed for node in graph)


def test_children_are_centred_under_reserved_width(
    tree_data: TreeData, layout_config: TreeLayoutConfig
) -> None:
    graph = _laid_out(tree_data, layout_config)

    for node in graph:
        children = graph.children_of(node)
        if not children or node.id in {"p2", "p4"}:
            continue
        left = min(child.x for child in children)
        right = max(child.x + child.subtree_width for child in children)
        assert (left + right) / 2 == pytest.approx(node.x + node.subtree_width / 2)


def test_spouses_share_the_row(tree_data: TreeData, layout_config: TreeLayoutConfig) -> None:
    graph = _laid_out(tree_data, layout_config)

    for node in graph:
        for partner in graph.partners_of(node):
            assert partner.y == node.y


def test_origin_offsets_every_node(tree_data: TreeData, layout_config: TreeLayoutConfig) -> None:
    graph = build_tree_graph(tree_data.persons, tree_data.relationships)
    root = graph.node("p1")
    assign_generation_levels(graph, root)
    compute_subtree_extents(graph, root, layout_config)

    position_tree_nodes(graph, root, layout_config, Point(1000.0, 500.0))

    assert (graph.node("p1").x, graph.node("p1").y) == (1000.0, 500.0)
    assert (graph.node("p8").x, graph.node("p8").y) == (1240.0, 660.0)


def test_multiple_spouses_advance_to_the_side(layout_config: TreeLayoutConfig) -> None:
    data = TreeData(
        persons=[person("a"), person("w1"), person("w2")],
        relationships=[spouse("a", "w1"), spouse("a", "w2")],
    )

    graph = _laid_out(data, layout_config, root_id="a")

    assert graph.node("w1").x == pytest.approx(110.0)
    assert graph.node("w2").x == pytest.approx(220.0)


def test_collapsed_node_hides_its_children(
    tree_data: TreeData, layout_config: TreeLayoutConfig
) -> None:
    graph = _laid_out(
        tree_data, layout_config, options=BuildTreeOptions(collapsed_ids=frozenset({"p3"}))
    )

    assert graph.node("p3").is_placed
    assert not graph.node("p6").is_placed
    assert not graph.node("p7").is_placed


def test_rtl_mirrors_across_root_span(tree_data: TreeData, layout_config: TreeLayoutConfig) -> None:
    config = replace(layout_config, direction="rtl")

    graph = _laid_out(tree_data, config)

    xs = {node.id: node.x for node in graph}
    assert xs == {
        "p1": 360.0,
        "p2": 250.0,
        "p3": 360.0,
        "p4": 250.0,
        "p5": 0.0,
        "p6": 360.0,
        "p7": 240.0,
        "p8": 120.0,
    }
    assert graph.node("p6").y == pytest.approx(160.0)


def test_cycle_places_each_node_once(layout_config: TreeLayoutConfig) -> None:
    data = TreeData(
        persons=[person("a"), person("b")],
        relationships=[parent("a", "b"), parent("b", "a")],
    )

    graph = _laid_out(data, layout_config, root_id="a")

    assert (graph.node("a").x, graph.node("a").y) == (0.0, 0.0)
    assert (graph.node("b").x, graph.node("b").y) == (0.0, 80.0)
