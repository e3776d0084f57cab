from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import Layout, TreeData


class TreeDataRepository(Protocol):
    def load(self, path: Path) -> TreeData: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, TreeData]]: ...

    def save_layout(self, layout: Layout, path: Path) -> None: ...
