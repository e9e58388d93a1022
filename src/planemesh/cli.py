"""
Command-line interface for planemesh.

Provides commands for inspecting, checking, converting and refining
triangulations stored on disk, and for locating points in them.
"""

from pathlib import Path
from typing import Any, Iterable, Optional

import click
from rich.console import Console
from rich.table import Table

from planemesh import __version__
from planemesh.core.config import ConfigManager, Settings
from planemesh.core.logging import configure_logging, get_logger
from planemesh.geometry.analysis import analyze_mesh, check_integrity
from planemesh.geometry.loader import MeshLoader
from planemesh.mesh.location import PointLocation
from planemesh.mesh.triangulation import Triangulation

console = Console()
logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (YAML)",
)
@click.option("--log-level", default=None, help="Override the configured log level")
@click.option("--json-logs", is_flag=True, default=False, help="Emit JSON log lines")
@click.pass_context
def main(
    ctx: click.Context,
    config_file: Optional[Path],
    log_level: Optional[str],
    json_logs: bool,
) -> None:
    """planemesh - Planar half-edge triangulations."""
    ctx.ensure_object(dict)
    try:
        settings = ConfigManager(config_file).load() if config_file else Settings()
    except Exception as e:
        console.print(f"[red]✗[/red] Failed to load settings: {e}")
        raise SystemExit(1)

    configure_logging(
        level=log_level or settings.logging.level,
        json_output=json_logs or settings.logging.json_output,
        log_file=settings.logging.log_file,
    )
    ctx.obj["settings"] = settings


def _load(ctx: click.Context, path: Path) -> Triangulation:
    return MeshLoader.load(path, ctx.obj["settings"].mesh)


def _nth(items: Iterable[Any], index: int, kind: str) -> Any:
    for i, item in enumerate(items):
        if i == index:
            return item
    raise click.BadParameter(f"No {kind} with index {index}")


# =============================================================================
# Inspection Commands
# =============================================================================


@main.command("info")
@click.argument("mesh_path", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def info(ctx: click.Context, mesh_path: Path) -> None:
    """Show statistics of a triangulation."""
    try:
        mesh = _load(ctx, mesh_path)
        report = analyze_mesh(mesh)

        table = Table(title=f"Mesh: {mesh_path.name}")
        table.add_column("Property", style="cyan")
        table.add_column("Value")

        for key, value in report.items():
            table.add_row(key.replace("_", " ").capitalize(), str(value))

        console.print(table)

    except Exception as e:
        console.print(f"[red]✗[/red] Failed to analyze mesh: {e}")
        raise SystemExit(1)


@main.command("check")
@click.argument("mesh_path", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def check(ctx: click.Context, mesh_path: Path) -> None:
    """Check the half-edge invariants of a triangulation."""
    try:
        mesh = _load(ctx, mesh_path)
    except Exception as e:
        console.print(f"[red]✗[/red] Failed to load mesh: {e}")
        raise SystemExit(1)

    report = check_integrity(mesh)
    if report.is_valid:
        console.print(
            f"[green]✓[/green] {mesh_path.name}: "
            f"{report.halfedges_checked} half-edges checked, no errors"
        )
        return

    for error in report.errors:
        console.print(f"  [red]•[/red] {error}")
    console.print(f"[red]✗[/red] {mesh_path.name}: {len(report.errors)} error(s)")
    raise SystemExit(1)


@main.command("locate")
@click.argument("mesh_path", type=click.Path(exists=True, path_type=Path))
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option("--start-face", type=int, default=None, help="Index of the face to start from")
@click.pass_context
def locate(
    ctx: click.Context, mesh_path: Path, x: float, y: float, start_face: Optional[int]
) -> None:
    """Locate the point (X, Y) in a triangulation."""
    try:
        mesh = _load(ctx, mesh_path)
        start = None
        if start_face is not None:
            start = _nth(mesh.faces(), start_face, "face")

        location = mesh.locate((x, y), start_face=start)

        table = Table(title=f"Location of ({x:g}, {y:g})")
        table.add_column("Property", style="cyan")
        table.add_column("Value")
        table.add_row("Kind", location.kind.value)

        if location.kind is PointLocation.IN_FACE:
            corners = ", ".join(
                str(mesh.position(n).as_tuple()) for n in mesh.face_nodes(location.face)
            )
            table.add_row("Face", str(location.face.index))
            table.add_row("Corners", corners)
        elif location.kind is PointLocation.ON_NODE:
            table.add_row("Node", str(location.node.index))
            table.add_row("Position", str(mesh.position(location.node).as_tuple()))
        else:
            label = "Edge" if location.kind is PointLocation.ON_EDGE else "Boundary edge"
            n1, n2 = mesh.edge_nodes(location.edge)
            table.add_row(label, str(location.edge.index))
            table.add_row(
                "Endpoints",
                f"{mesh.position(n1).as_tuple()} -> {mesh.position(n2).as_tuple()}",
            )

        console.print(table)

    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]✗[/red] Failed to locate point: {e}")
        raise SystemExit(1)


# =============================================================================
# Editing Commands
# =============================================================================


@main.command("convert")
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.argument("destination", type=click.Path(path_type=Path))
@click.pass_context
def convert(ctx: click.Context, source: Path, destination: Path) -> None:
    """Convert a triangulation to another file format."""
    try:
        mesh = _load(ctx, source)
        MeshLoader.save(mesh, destination)
        console.print(f"[green]✓[/green] Wrote {destination}")
        logger.info("mesh_converted", source=str(source), destination=str(destination))
    except Exception as e:
        console.print(f"[red]✗[/red] Failed to convert mesh: {e}")
        raise SystemExit(1)


@main.command("split-face")
@click.argument("mesh_path", type=click.Path(exists=True, path_type=Path))
@click.argument("face_index", type=int)
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option(
    "--output", "-o", type=click.Path(path_type=Path), required=True, help="Output file"
)
@click.pass_context
def split_face(
    ctx: click.Context, mesh_path: Path, face_index: int, x: float, y: float, output: Path
) -> None:
    """Insert the point (X, Y) into a face and save the result."""
    try:
        mesh = _load(ctx, mesh_path)
        face = _nth(mesh.faces(), face_index, "face")
        mesh.split_face(face, (x, y))
        MeshLoader.save(mesh, output)
        console.print(
            f"[green]✓[/green] Split face {face_index}: "
            f"{mesh.number_of_faces()} faces, written to {output}"
        )
        logger.info("face_split", face=face_index, x=x, y=y, output=str(output))
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]✗[/red] Failed to split face: {e}")
        raise SystemExit(1)


@main.command("split-edge")
@click.argument("mesh_path", type=click.Path(exists=True, path_type=Path))
@click.argument("edge_index", type=int)
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option(
    "--output", "-o", type=click.Path(path_type=Path), required=True, help="Output file"
)
@click.pass_context
def split_edge(
    ctx: click.Context, mesh_path: Path, edge_index: int, x: float, y: float, output: Path
) -> None:
    """Insert the point (X, Y) on an edge and save the result."""
    try:
        mesh = _load(ctx, mesh_path)
        edge = _nth(mesh.edges(), edge_index, "edge")
        mesh.split_edge(edge, (x, y))
        MeshLoader.save(mesh, output)
        console.print(
            f"[green]✓[/green] Split edge {edge_index}: "
            f"{mesh.number_of_faces()} faces, written to {output}"
        )
        logger.info("edge_split", edge=edge_index, x=x, y=y, output=str(output))
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]✗[/red] Failed to split edge: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
