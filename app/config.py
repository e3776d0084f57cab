from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import TreeLayoutConfig

DEFAULT_CONFIG_PATH = Path("config/layout.yaml")

ROOT_POLICY_FIRST_PARENTLESS = "first_parentless"
ROOT_POLICY_OLDEST_ANCESTOR = "oldest_ancestor"

RootPolicy = Literal["first_parentless", "oldest_ancestor"]


def _split_string_list_value(raw_value: str) -> list[str]:
    raw = raw_value.strip()
    if raw.startswith("[") and raw.endswith("]"):
        raw = raw[1:-1]
    return [token for token in (part.strip().strip("'\"") for part in raw.split(",")) if token]


class LayoutSettings(BaseModel):
    direction: Literal["ltr", "rtl"] = "ltr"
    node_width: float = Field(default=200.0, gt=0)
    node_height: float = Field(default=120.0, gt=0)
    horizontal_spacing: float = Field(default=60.0, ge=0)
    vertical_spacing: float = Field(default=100.0, ge=0)
    spouse_spacing: float = Field(default=40.0, ge=0)
    show_siblings: bool = True
    padding: float = Field(default=50.0, ge=0)
    max_generations: int | None = Field(default=None, ge=1)
    root_person_id: str | None = None
    root_policy: RootPolicy = ROOT_POLICY_FIRST_PARENTLESS
    collapsed_ids: Annotated[list[str], NoDecode] = Field(default_factory=list)
    elbow_threshold: float = Field(default=24.0, ge=0)
    corner_radius: float = Field(default=16.0, ge=0)
    spouse_curvature: float = Field(default=0.25, ge=0)

    @field_validator("direction", "root_policy", mode="before")
    @classmethod
    def normalize_choice(cls, value: object) -> str:
        return str(value or "").strip().lower()

    @field_validator("collapsed_ids", mode="before")
    @classmethod
    def normalize_collapsed_ids(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return _split_string_list_value(value)
        if isinstance(value, (list, tuple, set)):
            normalized: list[str] = []
            for item in value:
                normalized.extend(_split_string_list_value(str(item)))
            return normalized
        return _split_string_list_value(str(value))

    def to_layout_config(self) -> TreeLayoutConfig:
        return TreeLayoutConfig(
            direction=self.direction,
            node_width=self.node_width,
            node_height=self.node_height,
            horizontal_spacing=self.horizontal_spacing,
            vertical_spacing=self.vertical_spacing,
            spouse_spacing=self.spouse_spacing,
            show_siblings=self.show_siblings,
            root_person_id=self.root_person_id,
            collapsed_ids=frozenset(self.collapsed_ids),
            max_generations=self.max_generations,
            padding=self.padding,
            elbow_threshold=self.elbow_threshold,
            corner_radius=self.corner_radius,
            spouse_curvature=self.spouse_curvature,
        )


class ServiceSettings(BaseModel):
    title: str = "Family Tree Layout"
    cache_size: int = Field(default=32, ge=0)
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value or "INFO").strip().upper()


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FTL_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    service: ServiceSettings = ServiceSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("FTL_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
