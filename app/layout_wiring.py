from __future__ import annotations

from dataclasses import replace

from adapters.layout.family_tree import FamilyTreeLayoutEngine
from app.config import ROOT_POLICY_OLDEST_ANCESTOR, AppSettings
from domain.models import TreeData, TreeLayoutConfig
from domain.services.select_layout_root import select_oldest_ancestor_id


def build_layout_engine(settings: AppSettings) -> FamilyTreeLayoutEngine:
    return FamilyTreeLayoutEngine(
        config=settings.layout.to_layout_config(),
        cache_size=settings.service.cache_size,
    )


def resolve_layout_config(
    settings: AppSettings, data: TreeData, root_id: str | None = None
) -> TreeLayoutConfig:
    """Apply the configured root policy on top of the layout settings.

    The engine only falls back to the first parentless node; choosing the
    oldest ancestor by birth date is decided here, before the engine runs.
    """
    config = settings.layout.to_layout_config()
    preferred = root_id or config.root_person_id or data.root_person_id
    if preferred is None and settings.layout.root_policy == ROOT_POLICY_OLDEST_ANCESTOR:
        preferred = select_oldest_ancestor_id(data)
    if preferred == config.root_person_id:
        return config
    return replace(config, root_person_id=preferred)
