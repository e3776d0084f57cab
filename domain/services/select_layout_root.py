from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from domain.models import RELATIONSHIP_PARENT, GraphNode, Person, TreeData


def select_layout_root(
    nodes: Sequence[GraphNode], preferred_root_id: str | None = None
) -> GraphNode | None:
    """Pick the node generation depth is measured from.

    The preferred id wins when it resolves. Otherwise the first node without
    parents in input order, falling back to the first node when every node
    has a parent. No birth dates are compared here; callers wanting the
    oldest ancestor pass its id as ``preferred_root_id``.
    """
    if not nodes:
        return None
    if preferred_root_id:
        for node in nodes:
            if node.id == preferred_root_id:
                return node
    for node in nodes:
        if not node.parents:
            return node
    return nodes[0]


def select_oldest_ancestor_id(data: TreeData) -> str | None:
    if not data.persons:
        return None
    person_ids = {person.id for person in data.persons}
    has_parent = {
        rel.person2_id
        for rel in data.relationships
        if rel.relationship_type == RELATIONSHIP_PARENT and rel.person1_id in person_ids
    }
    candidates = [person for person in data.persons if person.id not in has_parent]
    if not candidates:
        return data.persons[0].id

    def sort_key(item: tuple[int, Person]) -> tuple[int, date, int]:
        index, person = item
        born = parse_birth_date(person.birth_date)
        if born is None:
            return (1, date.max, index)
        return (0, born, index)

    _, oldest = min(enumerate(candidates), key=sort_key)
    return oldest.id


def parse_birth_date(value: str | None) -> date | None:
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError:
        pass
    # Partial dates such as "1901" or "1901-03" are common in genealogy data.
    parts = raw.split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else 1
        day = int(parts[2][:2]) if len(parts) > 2 else 1
        return date(year, month, day)
    except (ValueError, IndexError):
        return None
