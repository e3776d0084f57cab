from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.filesystem.tree_data_repository import FileSystemTreeDataRepository
from app.config import load_settings
from app.layout_wiring import build_layout_engine, resolve_layout_config
from domain.models import Size, TreeData
from domain.services.search_tree_nodes import search_tree_nodes

app = typer.Typer(no_args_is_help=True)
console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_tree(repo: FileSystemTreeDataRepository, input_path: Path) -> TreeData:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        return repo.load(input_path)
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid tree data:[/] {input_path}: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


@app.command("layout")
def layout(
    input_path: Path = typer.Argument(..., help="Tree data JSON (persons and relationships)."),
    output_path: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Where to write the layout JSON.",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    root_id: Optional[str] = typer.Option(None, "--root", help="Person id to anchor the tree."),
    viewport_width: Optional[float] = typer.Option(None, help="Viewport width to fit."),
    viewport_height: Optional[float] = typer.Option(None, help="Viewport height to fit."),
) -> None:
    settings = load_settings(config_path)
    configure_logging(settings.service.log_level)
    repo = FileSystemTreeDataRepository()
    data = _load_tree(repo, input_path)

    engine = build_layout_engine(settings)
    result = engine.build_layout(data, resolve_layout_config(settings, data, root_id))
    if result is None:
        console.print(f"[yellow]Nothing to lay out in {input_path}[/]")
        raise typer.Exit(code=0)

    target_path = output_path or input_path.with_name(f"{input_path.stem}.layout.json")
    repo.save_layout(result, target_path)
    box = result.bounding_box
    console.print(
        f"[green]Wrote[/] {target_path} "
        f"({len(result.nodes)} nodes, {len(result.connections)} connections, "
        f"{box.width:g}x{box.height:g})"
    )
    if viewport_width is not None and viewport_height is not None:
        transform = engine.center_transform(result, Size(viewport_width, viewport_height))
        console.print(
            f"Transform: scale={transform.scale:.4f} "
            f"translate=({transform.translate_x:.2f}, {transform.translate_y:.2f})"
        )


@app.command("batch")
def batch(
    input_dir: Path = typer.Argument(..., help="Directory with tree data JSON files."),
    output_dir: Path = typer.Argument(..., help="Directory to write layout JSON files."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = load_settings(config_path)
    configure_logging(settings.service.log_level)
    repo = FileSystemTreeDataRepository()
    engine = build_layout_engine(settings)

    pairs = repo.load_all_with_paths(input_dir)
    if not pairs:
        console.print(f"[yellow]No tree data files found in {input_dir}[/]")
        raise typer.Exit(code=0)

    output_dir.mkdir(parents=True, exist_ok=True)
    for path, data in pairs:
        result = engine.build_layout(data, resolve_layout_config(settings, data))
        if result is None:
            console.print(f"[yellow]Skipped[/] {path}: nothing to lay out")
            continue
        target_path = output_dir / f"{path.stem}.layout.json"
        repo.save_layout(result, target_path)
        console.print(f"[green]Wrote[/] {target_path}")


@app.command("search")
def search(
    input_path: Path = typer.Argument(..., help="Tree data JSON file."),
    query: str = typer.Argument(..., help="Name fragment to look for."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    settings = load_settings(config_path)
    repo = FileSystemTreeDataRepository()
    data = _load_tree(repo, input_path)
    result = build_layout_engine(settings).build_layout(
        data, resolve_layout_config(settings, data)
    )
    matches = search_tree_nodes(result.nodes if result else [], query)
    if not matches:
        console.print(f"[yellow]No matches for[/] {query!r}")
        raise typer.Exit(code=0)
    for node in matches:
        console.print(f"{node.id}\t{node.person.display_name()}\tgeneration {node.level}")


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Tree data JSON file to validate.")) -> None:
    repo = FileSystemTreeDataRepository()
    data = _load_tree(repo, input_path)
    person_ids = {person.id for person in data.persons}
    dangling = [
        rel
        for rel in data.relationships
        if rel.person1_id not in person_ids or rel.person2_id not in person_ids
    ]
    console.print(
        f"[green]Valid tree data:[/] {input_path} "
        f"({len(data.persons)} persons, {len(data.relationships)} relationships)"
    )
    if dangling:
        console.print(
            f"[yellow]{len(dangling)} relationship(s) reference unknown persons "
            "and will be ignored by the layout.[/]"
        )


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8080, help="Port to listen on."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    import uvicorn

    from app.web_main import create_app

    settings = load_settings(config_path)
    configure_logging(settings.service.log_level)
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.service.log_level.lower())


if __name__ == "__main__":
    app()
