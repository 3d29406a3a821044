from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from world_places.activities.build_registry import places_from_master
from world_places.core.config import BuildConfig
from world_places.core.exceptions import PipelineError
from world_places.orchestrators.place_pipeline import build_from_config, with_overrides
from world_places.utils.assets import read_json

app = typer.Typer(
    name="world-places",
    help="Build the world place registry and map assets from a TopoJSON topology",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _fail(err: PipelineError) -> NoReturn:
    details = err.to_error_dict()
    console.print(
        f"[bold red]{details['category']} error[/] "
        f"[dim]({details['stage']}/{details['code']})[/]: {escape(details['message'])}"
    )
    if details["run_id"]:
        console.print(f"[dim]run_id={details['run_id']}[/]")
    raise typer.Exit(code=1)


@app.command("build")
def build_command(
    topology: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Asset root"),
    object_name: Optional[str] = typer.Option(None, "--object", help="Topology object name"),
    resolution: Optional[str] = typer.Option(None, "--resolution", help="Filename label"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog YAML override"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Build places, aliases, version meta, and map assets.
    """
    _configure_logging(verbose)
    try:
        config = with_overrides(
            BuildConfig.from_env(),
            topology_path=str(topology),
            output_dir=str(output_dir) if output_dir else None,
            object_name=object_name,
            resolution=resolution,
            catalog_path=str(catalog) if catalog else None,
        )
        result, paths = build_from_config(config)
    except PipelineError as err:
        _fail(err)

    table = Table(title="World Places Build")
    table.add_column("Artifact", style="bold")
    table.add_column("Value")

    table.add_row("Places", str(len(result["places"])))
    table.add_row("Map features", str(len(result["countries"]["features"])))
    table.add_row("Hash", result["version"].hash)
    table.add_row("Revision", result["version"].revision)
    table.add_row("Place master", str(paths.place_master))
    table.add_row("Countries", str(paths.countries))

    console.print(table)


@app.command("inspect")
def inspect_command(
    place_master: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
):
    """
    Show the places of a written place_master.json.
    """
    try:
        places = places_from_master(read_json(place_master))
    except PipelineError as err:
        _fail(err)

    table = Table(title=f"Places ({len(places)})")
    table.add_column("Code", style="bold")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Sort", justify="right")
    table.add_column("Draw", justify="right")
    table.add_column("Active")

    for place in places:
        table.add_row(
            place.place_code,
            place.type.value,
            place.name_en,
            str(place.sort_order),
            str(place.draw_order),
            "yes" if place.is_active else "no",
        )

    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
