from __future__ import annotations

from domain.models import GraphNode, Point, TreeGraph, TreeLayoutConfig
from domain.services.compute_subtree_extents import is_layout_leaf


def position_tree_nodes(
    graph: TreeGraph,
    root: GraphNode,
    config: TreeLayoutConfig,
    origin: Point = Point(0.0, 0.0),
) -> set[str]:
    """Assign absolute coordinates depth-first from ``root`` at ``origin``.

    Spouses line up beside the node on its row; children are laid out on the
    next row, centred under the node's reserved subtree width. Requires
    ``compute_subtree_extents`` to have run. Returns the ids that were placed.

    Only the root's descendants and their direct spouses are placed. A
    spouse's other partners and the children of that other union, like nodes
    outside the root's component, keep ``is_placed=False`` and origin
    coordinates, so renderers should skip them.
    """
    placed: set[str] = set()
    spouse_step = config.node_width + config.spouse_spacing
    row_step = config.node_height + config.vertical_spacing

    stack: list[tuple[GraphNode, float, float]] = [(root, origin.x, origin.y)]
    while stack:
        node, x, y = stack.pop()
        if node.id in placed:
            continue
        _mark(node, x, y, placed)

        spouse_x = x
        for partner in graph.partners_of(node):
            spouse_x += spouse_step
            if partner.id not in placed:
                _mark(partner, spouse_x, y, placed)

        if is_layout_leaf(node, config):
            continue
        children = graph.children_of(node)
        children_width = sum(child.subtree_width for child in children)
        children_width += (len(children) - 1) * config.horizontal_spacing
        child_x = x + node.subtree_width / 2 - children_width / 2
        slots: list[tuple[GraphNode, float, float]] = []
        for child in children:
            slots.append((child, child_x, y + row_step))
            child_x += child.subtree_width + config.horizontal_spacing
        # Reversed so the leftmost child is placed first.
        stack.extend(reversed(slots))

    if config.direction == "rtl":
        _mirror(graph, root, config, origin, placed)
    return placed


def _mark(node: GraphNode, x: float, y: float, placed: set[str]) -> None:
    node.x = x
    node.y = y
    node.is_placed = True
    placed.add(node.id)


def _mirror(
    graph: TreeGraph,
    root: GraphNode,
    config: TreeLayoutConfig,
    origin: Point,
    placed: set[str],
) -> None:
    # Reflect across the root's reserved span so the tree reads right-to-left.
    span = root.subtree_width
    for node_id in placed:
        node = graph.node(node_id)
        node.x = origin.x + span - config.node_width - (node.x - origin.x)
