from __future__ import annotations

from collections.abc import Iterable

from domain.models import GraphNode


def search_tree_nodes(nodes: Iterable[GraphNode], query: str) -> list[GraphNode]:
    needle = (query or "").strip().casefold()
    if not needle:
        return []

    matches: list[GraphNode] = []
    for node in nodes:
        person = node.person
        names = (
            person.given_name,
            person.family_name,
            person.full_name_ar,
            person.full_name_en,
        )
        if any(needle in name.casefold() for name in names if name):
            matches.append(node)
    return matches
