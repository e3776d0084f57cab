from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, LayoutSettings, ServiceSettings
from domain.models import TreeData, TreeLayoutConfig
from tests.helpers.tree_fixtures import load_tree_fixture


def _clear_ftl_env() -> None:
    for key in list(os.environ):
        if key.startswith("FTL_"):
            os.environ.pop(key, None)


_clear_ftl_env()


@pytest.fixture(autouse=True)
def clear_ftl_env() -> Generator[None, None, None]:
    _clear_ftl_env()
    yield
    _clear_ftl_env()


@pytest.fixture
def tree_data() -> TreeData:
    return load_tree_fixture("three_generations.json")


@pytest.fixture
def layout_config() -> TreeLayoutConfig:
    return TreeLayoutConfig(
        node_width=100.0,
        node_height=50.0,
        horizontal_spacing=20.0,
        vertical_spacing=30.0,
        spouse_spacing=10.0,
        padding=10.0,
    )


@pytest.fixture
def layout_settings() -> LayoutSettings:
    return LayoutSettings(
        node_width=100.0,
        node_height=50.0,
        horizontal_spacing=20.0,
        vertical_spacing=30.0,
        spouse_spacing=10.0,
        padding=10.0,
    )


@pytest.fixture
def app_settings(layout_settings: LayoutSettings) -> AppSettings:
    return AppSettings(
        layout=layout_settings,
        service=ServiceSettings(title="Test Layout", cache_size=4, log_level="DEBUG"),
    )


@pytest.fixture
def app_settings_factory(
    layout_settings: LayoutSettings,
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(
            layout=layout_settings.model_copy(update=overrides),
            service=ServiceSettings(title="Test Layout", cache_size=4),
        )

    return _factory
