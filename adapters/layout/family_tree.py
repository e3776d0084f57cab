from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from hashlib import sha1

import orjson

from domain.models import (
    BuildTreeOptions,
    Layout,
    Point,
    Size,
    TreeData,
    TreeLayoutConfig,
    ViewportTransform,
)
from domain.ports.layout import TreeLayoutEngine
from domain.services.assign_generation_levels import assign_generation_levels
from domain.services.build_tree_graph import build_tree_graph
from domain.services.compute_subtree_extents import compute_subtree_extents
from domain.services.fit_viewport import fit_bounding_box, fit_viewport
from domain.services.position_tree_nodes import position_tree_nodes
from domain.services.select_layout_root import select_layout_root
from domain.services.synthesize_connections import synthesize_connections

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 32


def layout_fingerprint(data: TreeData, config: TreeLayoutConfig) -> str:
    payload = {
        "data": data.model_dump(mode="json"),
        "config": config.fingerprint_payload(),
    }
    return sha1(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS)).hexdigest()


class FamilyTreeLayoutEngine(TreeLayoutEngine):
    def __init__(
        self,
        config: TreeLayoutConfig | None = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        self.config = config or TreeLayoutConfig()
        self.cache_size = max(0, cache_size)
        self._cache: OrderedDict[str, Layout] = OrderedDict()
        self._lock = threading.Lock()

    def build_layout(
        self, data: TreeData, config: TreeLayoutConfig | None = None
    ) -> Layout | None:
        if not data.persons:
            return None
        resolved = config or self.config

        try:
            key = layout_fingerprint(data, resolved)
            cached = self._cache_get(key)
            if cached is not None:
                return cached
            layout = self._compute(data, resolved)
        except Exception:  # noqa: BLE001
            logger.exception(
                "Family tree layout failed for %d persons and %d relationships.",
                len(data.persons),
                len(data.relationships),
            )
            return None

        if layout is not None:
            self._cache_put(key, layout)
        return layout

    def center_transform(self, layout: Layout | None, viewport: Size) -> ViewportTransform:
        if layout is None:
            return ViewportTransform()
        return fit_viewport(layout.bounding_box, viewport)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def cached_layouts(self) -> int:
        with self._lock:
            return len(self._cache)

    def _compute(self, data: TreeData, config: TreeLayoutConfig) -> Layout | None:
        options = BuildTreeOptions(
            include_siblings=config.show_siblings,
            collapsed_ids=config.collapsed_ids,
        )
        graph = build_tree_graph(data.persons, data.relationships, options)
        nodes = graph.ordered()
        if not nodes:
            return None

        root = select_layout_root(nodes, config.root_person_id or data.root_person_id)
        if root is None:
            return None

        assign_generation_levels(graph, root)
        compute_subtree_extents(graph, root, config)
        position_tree_nodes(graph, root, config, Point(0.0, 0.0))
        connections = synthesize_connections(graph, config)
        bounding_box = fit_bounding_box(nodes, config)
        logger.debug(
            "Laid out %d nodes and %d connections from root %s.",
            len(nodes),
            len(connections),
            root.id,
        )
        return Layout(
            nodes=tuple(nodes),
            connections=tuple(connections),
            root=root,
            bounding_box=bounding_box,
            sibling_pairs=tuple(graph.sibling_pairs),
        )

    def _cache_get(self, key: str) -> Layout | None:
        with self._lock:
            layout = self._cache.get(key)
            if layout is not None:
                self._cache.move_to_end(key)
            return layout

    def _cache_put(self, key: str, layout: Layout) -> None:
        if self.cache_size == 0:
            return
        with self._lock:
            self._cache[key] = layout
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
