from __future__ import annotations

from domain.models import (
    CONNECTION_PARENT_CHILD,
    CONNECTION_SPOUSE,
    ConnectionDescriptor,
    GraphNode,
    Point,
    SpouseInfo,
    TreeGraph,
    TreeLayoutConfig,
)


def synthesize_connections(
    graph: TreeGraph, config: TreeLayoutConfig
) -> list[ConnectionDescriptor]:
    """Derive one drawable connector per related pair.

    Parent-child connectors are keyed by the ordered pair, spouse connectors
    by the sorted pair, so repeated relationship rows draw a single edge.
    """
    connections: list[ConnectionDescriptor] = []
    seen_parent_child: set[tuple[str, str]] = set()
    seen_spouses: set[tuple[str, str]] = set()

    for node in graph:
        for child in graph.children_of(node):
            key = (node.id, child.id)
            if key in seen_parent_child:
                continue
            seen_parent_child.add(key)
            connections.append(_parent_child_connection(node, child, config))

        for info in node.spouses:
            partner = graph.get(info.partner_id)
            if partner is None:
                continue
            pair = (node.id, partner.id) if node.id <= partner.id else (partner.id, node.id)
            if pair in seen_spouses:
                continue
            seen_spouses.add(pair)
            connections.append(_spouse_connection(node, partner, info, pair, config))

    return connections


def _parent_child_connection(
    parent: GraphNode, child: GraphNode, config: TreeLayoutConfig
) -> ConnectionDescriptor:
    start = Point(parent.x + config.node_width / 2, parent.y + config.node_height)
    end = Point(child.x + config.node_width / 2, child.y)
    return ConnectionDescriptor(
        id=f"pc-{parent.id}-{child.id}",
        kind=CONNECTION_PARENT_CHILD,
        source_id=parent.id,
        target_id=child.id,
        start=start,
        end=end,
        path=parent_child_path(start, end, config),
        color=config.parent_child_color,
        stroke_width=config.stroke_width,
        is_dashed=False,
    )


def _spouse_connection(
    node: GraphNode,
    partner: GraphNode,
    info: SpouseInfo,
    pair: tuple[str, str],
    config: TreeLayoutConfig,
) -> ConnectionDescriptor:
    mid_offset = config.node_height / 2
    if node.x <= partner.x:
        start = Point(node.x + config.node_width, node.y + mid_offset)
        end = Point(partner.x, partner.y + mid_offset)
    else:
        start = Point(node.x, node.y + mid_offset)
        end = Point(partner.x + config.node_width, partner.y + mid_offset)
    dissolved = info.relationship.is_dissolved
    return ConnectionDescriptor(
        id=f"sp-{pair[0]}-{pair[1]}",
        kind=CONNECTION_SPOUSE,
        source_id=node.id,
        target_id=partner.id,
        start=start,
        end=end,
        path=spouse_path(start, end, config),
        color=config.divorced_color if dissolved else config.spouse_color,
        stroke_width=config.stroke_width,
        is_dashed=dissolved,
        relationship_id=info.relationship.id or None,
    )


def parent_child_path(start: Point, end: Point, config: TreeLayoutConfig) -> str:
    dx = end.x - start.x
    dy = end.y - start.y
    if dx == 0 or dy == 0:
        return f"M {_fmt(start.x)} {_fmt(start.y)} L {_fmt(end.x)} {_fmt(end.y)}"

    mid_y = start.y + dy / 2
    if abs(dx) <= config.elbow_threshold:
        return (
            f"M {_fmt(start.x)} {_fmt(start.y)} "
            f"C {_fmt(start.x)} {_fmt(mid_y)}, {_fmt(end.x)} {_fmt(mid_y)}, "
            f"{_fmt(end.x)} {_fmt(end.y)}"
        )

    radius = min(config.corner_radius, min(abs(dx), abs(dy)) / 4)
    sx = 1 if dx > 0 else -1
    sy = 1 if dy > 0 else -1
    return (
        f"M {_fmt(start.x)} {_fmt(start.y)} "
        f"L {_fmt(start.x)} {_fmt(mid_y - sy * radius)} "
        f"Q {_fmt(start.x)} {_fmt(mid_y)} {_fmt(start.x + sx * radius)} {_fmt(mid_y)} "
        f"L {_fmt(end.x - sx * radius)} {_fmt(mid_y)} "
        f"Q {_fmt(end.x)} {_fmt(mid_y)} {_fmt(end.x)} {_fmt(mid_y + sy * radius)} "
        f"L {_fmt(end.x)} {_fmt(end.y)}"
    )


def spouse_path(start: Point, end: Point, config: TreeLayoutConfig) -> str:
    bow = abs(end.x - start.x) * config.spouse_curvature
    control_x = (start.x + end.x) / 2
    control_y = min(start.y, end.y) - bow
    return (
        f"M {_fmt(start.x)} {_fmt(start.y)} "
        f"Q {_fmt(control_x)} {_fmt(control_y)} {_fmt(end.x)} {_fmt(end.y)}"
    )


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text
