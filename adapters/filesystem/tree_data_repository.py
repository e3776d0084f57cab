from __future__ import annotations

from pathlib import Path
from typing import Any, List

import orjson

from domain.models import Layout, TreeData
from domain.ports.repositories import TreeDataRepository


class FileSystemTreeDataRepository(TreeDataRepository):
    def load(self, path: Path) -> TreeData:
        payload = orjson.loads(path.read_bytes())
        if not isinstance(payload, dict):
            msg = f"Tree data must be a JSON object: {path}"
            raise ValueError(msg)
        return TreeData.model_validate(payload)

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, TreeData]]:
        return [(path, self.load(path)) for path in sorted(directory.glob("*.json"))]

    def save_layout(self, layout: Layout, path: Path) -> None:
        write_json_atomic(path, layout.to_dict())


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload))
    tmp_path.replace(path)
