"""CLI entry point for pix2stl.

Usage:
    pix2stl convert logo.png                         # Height map -> model.stl
    pix2stl convert logo.png --strategy outline      # Cookie cutter
    pix2stl convert photo.jpg -o relief.stl --config configs/default.yaml
    pix2stl info                                     # Show steps and config
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pix2stl.core.logging import setup_logging

app = typer.Typer(name="pix2stl", help="Turn a PNG/JPEG image into an ASCII STL solid")
console = Console()

MAX_IMAGE_BYTES = 2 * 1024 * 1024


def _load_config(config: Optional[Path], strategy: Optional[str]):
    from pix2stl.core.contracts import GenerationConfig
    from pix2stl.core.pipeline_runner import load_generation_config

    cfg = load_generation_config(config) if config else GenerationConfig()
    if strategy:
        cfg = cfg.model_copy(update={"strategy": strategy})
    return cfg


@app.command()
def convert(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="PNG or JPEG image"),
    output: Path = typer.Option(Path("model.stl"), "--output", "-o", help="STL output path"),
    strategy: Optional[str] = typer.Option(
        None, "--strategy", "-s", help="'heightmap' or 'outline' (overrides config)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Generation config YAML"),
    max_bytes: int = typer.Option(MAX_IMAGE_BYTES, help="Reject images larger than this"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Convert one image to an STL file."""
    try:
        setup_logging(log_level)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    from pix2stl.core.contracts import PipelineFailure
    from pix2stl.core.pipeline_runner import run_pipeline
    from pix2stl.steps.s01_raster_sample._decode import sniff_image_type

    if strategy is not None and strategy not in ("heightmap", "outline"):
        console.print(f"[red]Unknown strategy '{strategy}' (use heightmap or outline)[/red]")
        raise typer.Exit(1)

    data = image.read_bytes()
    if len(data) > max_bytes:
        console.print(f"[red]File size must be at most {max_bytes} bytes (got {len(data)})[/red]")
        raise typer.Exit(1)
    if sniff_image_type(data) is None:
        console.print("[red]Only PNG and JPEG files are supported[/red]")
        raise typer.Exit(1)

    cfg = _load_config(config, strategy)
    result = run_pipeline(data, cfg)

    if isinstance(result, PipelineFailure):
        where = f" in {result.step}" if result.step else ""
        console.print(f"[red]{result.kind}{where}: {escape(result.message)}[/red]")
        raise typer.Exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.stl_text, encoding="utf-8")

    table = Table(title=f"{image.name} -> {output}")
    table.add_column("Step", style="cyan")
    table.add_column("Time (s)", justify="right", style="yellow")
    for meta in result.steps:
        table.add_row(meta.step_name, f"{meta.elapsed_seconds:.3f}")
    console.print(table)
    console.print(
        f"[green]Done.[/green] {result.strategy}: {result.num_triangles} triangles "
        f"from {result.grid_width}x{result.grid_height} grid"
    )


@app.command()
def info(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Generation config YAML"),
) -> None:
    """Show pipeline steps and the effective configuration."""
    from pix2stl.core.pipeline_runner import PIPELINE_STEPS, import_step_class

    cfg = _load_config(config, None)
    table = Table(title=f"Pipeline: {cfg.strategy}")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Config", style="yellow")

    for i, entry in enumerate(PIPELINE_STEPS, 1):
        step_cls = import_step_class(entry.module)
        table.add_row(str(i), step_cls.name, entry.module, entry.config_key)
    console.print(table)
    console.print_json(cfg.model_dump_json())


if __name__ == "__main__":
    app()
