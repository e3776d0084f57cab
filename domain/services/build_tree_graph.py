from __future__ import annotations

import logging
from collections.abc import Iterable

from domain.models import (
    RELATIONSHIP_PARENT,
    RELATIONSHIP_SIBLING,
    RELATIONSHIP_SPOUSE,
    BuildTreeOptions,
    GraphNode,
    Person,
    Relationship,
    SpouseInfo,
    TreeGraph,
)

logger = logging.getLogger(__name__)


def build_tree_graph(
    persons: Iterable[Person],
    relationships: Iterable[Relationship],
    options: BuildTreeOptions | None = None,
) -> TreeGraph:
    """Build the node arena with parent, child and spouse adjacency.

    Edges that reference a person outside ``persons`` are dropped. Sibling
    edges never produce adjacency; they are only kept as informational pairs
    when ``options.include_siblings`` is set.
    """
    options = options or BuildTreeOptions()
    graph = TreeGraph()
    for person in persons:
        if person.id in graph.nodes:
            continue
        graph.nodes[person.id] = GraphNode(
            id=person.id,
            person=person,
            is_collapsed=person.id in options.collapsed_ids,
        )

    unions: list[tuple[GraphNode, GraphNode]] = []
    seen_siblings: set[tuple[str, str]] = set()
    for relationship in relationships:
        first = graph.get(relationship.person1_id)
        second = graph.get(relationship.person2_id)
        if first is None or second is None:
            logger.debug(
                "Skipping %s relationship %s: unknown person %s.",
                relationship.relationship_type,
                relationship.id or "<no id>",
                relationship.person1_id if first is None else relationship.person2_id,
            )
            continue

        if relationship.relationship_type == RELATIONSHIP_PARENT:
            _link_parent(first, second)
        elif relationship.relationship_type == RELATIONSHIP_SPOUSE:
            if _link_spouses(first, second, relationship):
                unions.append((first, second))
        elif relationship.relationship_type == RELATIONSHIP_SIBLING:
            if not options.include_siblings or first.id == second.id:
                continue
            pair = (first.id, second.id) if first.id < second.id else (second.id, first.id)
            if pair not in seen_siblings:
                seen_siblings.add(pair)
                graph.sibling_pairs.append(pair)

    # Parent rows may follow spouse rows, so common children are resolved last.
    for first, second in unions:
        common = _common_children(graph, first, second)
        for node, partner in ((first, second), (second, first)):
            info = node.spouse_info(partner.id)
            if info is not None:
                info.common_children = list(common)

    return graph


def _link_parent(parent: GraphNode, child: GraphNode) -> None:
    if child.id not in parent.children:
        parent.children.append(child.id)
    if parent.id not in child.parents:
        child.parents.append(parent.id)


def _link_spouses(first: GraphNode, second: GraphNode, relationship: Relationship) -> bool:
    linked = False
    if first.spouse_info(second.id) is None:
        first.spouses.append(SpouseInfo(partner_id=second.id, relationship=relationship))
        linked = True
    if second.spouse_info(first.id) is None:
        second.spouses.append(SpouseInfo(partner_id=first.id, relationship=relationship))
        linked = True
    return linked


def _common_children(graph: TreeGraph, first: GraphNode, second: GraphNode) -> list[str]:
    return [
        node.id
        for node in graph
        if first.id in node.parents and second.id in node.parents
    ]
