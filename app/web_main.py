from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Query
from fastapi.responses import ORJSONResponse

from app.config import AppSettings
from app.layout_wiring import build_layout_engine, resolve_layout_config
from domain.models import Size, TreeData
from domain.services.search_tree_nodes import search_tree_nodes

logger = logging.getLogger(__name__)


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.service.title, default_response_class=ORJSONResponse)
    engine = build_layout_engine(settings)

    @app.get("/api/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "cached_layouts": engine.cached_layouts}

    @app.post("/api/layout")
    def build_layout(
        data: TreeData,
        root_id: str | None = Query(default=None),
        viewport_width: float | None = Query(default=None, gt=0),
        viewport_height: float | None = Query(default=None, gt=0),
    ) -> dict[str, Any]:
        layout = engine.build_layout(data, resolve_layout_config(settings, data, root_id))
        if layout is None:
            logger.info("No layout for %d persons.", len(data.persons))
            return {"layout": None, "transform": None}

        transform = None
        if viewport_width is not None and viewport_height is not None:
            transform = engine.center_transform(
                layout, Size(viewport_width, viewport_height)
            ).to_dict()
        return {"layout": layout.to_dict(), "transform": transform}

    @app.post("/api/search")
    def search(data: TreeData, q: str = Query(default="")) -> dict[str, Any]:
        layout = engine.build_layout(data, resolve_layout_config(settings, data))
        matches = search_tree_nodes(layout.nodes if layout else [], q)
        return {
            "query": q,
            "matches": [
                {"id": node.id, "name": node.person.display_name(), "level": node.level}
                for node in matches
            ],
        }

    return app
