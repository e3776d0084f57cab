from __future__ import annotations

from pathlib import Path

import orjson
import pytest
from pydantic import ValidationError

from adapters.filesystem.tree_data_repository import FileSystemTreeDataRepository
from adapters.layout.family_tree import FamilyTreeLayoutEngine
from domain.models import TreeLayoutConfig
from tests.helpers.tree_fixtures import tree_fixture_path


def test_load_reads_persons_and_relationships() -> None:
    data = FileSystemTreeDataRepository().load(tree_fixture_path("three_generations.json"))

    assert [p.id for p in data.persons] == [f"p{i}" for i in range(1, 9)]
    assert len(data.relationships) == 13
    assert data.persons[0].gender == "male"
    assert data.relationships[0].relationship_type == "spouse"


def test_load_all_with_paths_is_sorted(tmp_path: Path) -> None:
    source = tree_fixture_path("three_generations.json").read_bytes()
    (tmp_path / "b.json").write_bytes(source)
    (tmp_path / "a.json").write_bytes(source)
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    pairs = FileSystemTreeDataRepository().load_all_with_paths(tmp_path)

    assert [path.name for path, _ in pairs] == ["a.json", "b.json"]


def test_load_rejects_non_object_payload(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_bytes(b"[1, 2, 3]")

    with pytest.raises(ValueError, match="JSON object"):
        FileSystemTreeDataRepository().load(path)


def test_load_rejects_unknown_relationship_type(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_bytes(
        orjson.dumps(
            {
                "persons": [{"id": "a"}, {"id": "b"}],
                "relationships": [
                    {"person1_id": "a", "person2_id": "b", "relationship_type": "cousin"}
                ],
            }
        )
    )

    with pytest.raises(ValidationError):
        FileSystemTreeDataRepository().load(path)


def test_save_layout_writes_json_atomically(tmp_path: Path) -> None:
    repo = FileSystemTreeDataRepository()
    data = repo.load(tree_fixture_path("three_generations.json"))
    layout = FamilyTreeLayoutEngine(TreeLayoutConfig()).build_layout(data)
    assert layout is not None
    target = tmp_path / "out" / "tree.layout.json"

    repo.save_layout(layout, target)

    payload = orjson.loads(target.read_bytes())
    assert payload["root_id"] == "p1"
    assert len(payload["nodes"]) == 8
    assert not target.with_suffix(".json.tmp").exists()
