from __future__ import annotations

from domain.models import GraphNode, TreeGraph, TreeLayoutConfig


def is_layout_leaf(node: GraphNode, config: TreeLayoutConfig) -> bool:
    if node.is_collapsed or not node.children:
        return True
    if config.max_generations is not None and node.level >= config.max_generations - 1:
        return True
    return False


def couple_width(node: GraphNode, config: TreeLayoutConfig) -> float:
    return config.node_width + len(node.spouses) * (config.node_width + config.spouse_spacing)


def compute_subtree_extents(graph: TreeGraph, root: GraphNode, config: TreeLayoutConfig) -> None:
    """Reserve horizontal space for every node's descendant fan, bottom-up.

    Leaves, collapsed nodes and nodes at the generation limit reserve one
    card. Any other node needs the wider of its children's row (widths plus
    sibling spacing) and its own card with all spouses beside it.
    """
    for node in graph:
        node.subtree_width = config.node_width

    measured: set[str] = set()
    in_progress: set[str] = set()
    stack: list[tuple[GraphNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node.id in measured:
            continue
        if not expanded:
            # Re-entered while its own descendants are measured: keeps node_width.
            if node.id in in_progress:
                continue
            in_progress.add(node.id)
            stack.append((node, True))
            if not is_layout_leaf(node, config):
                for child in reversed(graph.children_of(node)):
                    if child.id not in measured and child.id not in in_progress:
                        stack.append((child, False))
            continue

        if not is_layout_leaf(node, config):
            children = graph.children_of(node)
            children_width = sum(child.subtree_width for child in children)
            children_width += (len(children) - 1) * config.horizontal_spacing
            node.subtree_width = max(children_width, couple_width(node, config))
        in_progress.discard(node.id)
        measured.add(node.id)
