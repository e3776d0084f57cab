from __future__ import annotations

from collections.abc import Iterable

from domain.models import BoundingBox, GraphNode, Size, TreeLayoutConfig, ViewportTransform


def fit_bounding_box(nodes: Iterable[GraphNode], config: TreeLayoutConfig) -> BoundingBox:
    items = list(nodes)
    if not items:
        return BoundingBox(min_x=0.0, max_x=0.0, min_y=0.0, max_y=0.0, width=0.0, height=0.0)

    min_x = min(node.x for node in items)
    max_x = max(node.x + config.node_width for node in items)
    min_y = min(node.y for node in items)
    max_y = max(node.y + config.node_height for node in items)
    padding = config.padding
    return BoundingBox(
        min_x=min_x - padding,
        max_x=max_x + padding,
        min_y=min_y - padding,
        max_y=max_y + padding,
        width=max_x - min_x + 2 * padding,
        height=max_y - min_y + 2 * padding,
    )


def fit_viewport(box: BoundingBox | None, viewport: Size) -> ViewportTransform:
    """Scale and centre ``box`` inside ``viewport`` without ever zooming in."""
    if box is None or box.width <= 0 or box.height <= 0:
        return ViewportTransform()
    if viewport.width <= 0 or viewport.height <= 0:
        return ViewportTransform()

    scale = min(viewport.width / box.width, viewport.height / box.height, 1.0)
    translate_x = (viewport.width - box.width * scale) / 2 - box.min_x * scale
    translate_y = (viewport.height - box.height * scale) / 2 - box.min_y * scale
    return ViewportTransform(scale=scale, translate_x=translate_x, translate_y=translate_y)
