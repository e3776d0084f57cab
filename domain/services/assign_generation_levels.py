from __future__ import annotations

from domain.models import GraphNode, TreeGraph


def assign_generation_levels(graph: TreeGraph, root: GraphNode) -> set[str]:
    """Stamp generation levels reachable from ``root``.

    Children sit one level below their parent, spouses share the level of the
    node they were reached from. Each node is levelled once, in depth-first
    order (children before spouses); nodes outside the root's component keep
    their default level of 0. Returns the ids that were reached.
    """
    visited: set[str] = set()
    stack: list[tuple[GraphNode, int]] = [(root, 0)]
    while stack:
        node, level = stack.pop()
        if node.id in visited:
            continue
        visited.add(node.id)
        node.level = level
        # Pushed in reverse so the first child is visited first.
        for partner in reversed(graph.partners_of(node)):
            stack.append((partner, level))
        for child in reversed(graph.children_of(node)):
            stack.append((child, level + 1))
    return visited
