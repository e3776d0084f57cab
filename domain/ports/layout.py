from __future__ import annotations

from typing import Protocol

from domain.models import Layout, Size, TreeData, TreeLayoutConfig, ViewportTransform


class TreeLayoutEngine(Protocol):
    def build_layout(
        self, data: TreeData, config: TreeLayoutConfig | None = None
    ) -> Layout | None:
        ...

    def center_transform(self, layout: Layout | None, viewport: Size) -> ViewportTransform:
        ...
